#!/usr/bin/env python3

import os
import sys

from ape_accounts import import_account_from_private_key
from dotenv import load_dotenv

from accountable_deployment.constants import LOCALHOST, PRIVATE_KEY_ENVVARS

DEPLOYER_ALIAS = "DEPLOYER"
PASSPHRASE_ENVVAR = "DEPLOYER_PASSPHRASE"


def main(network: str):
    load_dotenv()
    try:
        private_key_envvar = PRIVATE_KEY_ENVVARS[network]
    except KeyError:
        raise Exception(
            f"Unsupported network '{network}'; expected one of {', '.join(PRIVATE_KEY_ENVVARS)}."
        )
    try:
        passphrase = os.environ[PASSPHRASE_ENVVAR]
        private_key = os.environ[private_key_envvar]
    except KeyError:
        raise Exception(
            "There are missing environment variables. "
            f"Please set {PASSPHRASE_ENVVAR} and {private_key_envvar}."
        )
    account = import_account_from_private_key(
        f"{DEPLOYER_ALIAS}-{network}",
        passphrase,
        private_key
    )
    print(f"Account imported: {account.address}")


if __name__ == '__main__':
    main(sys.argv[1] if len(sys.argv) > 1 else LOCALHOST)
