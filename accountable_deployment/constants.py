from pathlib import Path

import accountable_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(accountable_deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
NETWORKS_FILEPATH = DEPLOYMENT_DIR / "networks.yml"

#
# Networks
#

LOCALHOST = "localhost"
SEPOLIA = "sepolia"
MUMBAI = "mumbai"
MAINNET = "mainnet"
POLYGON = "polygon"

PUBLIC_NETWORKS = [SEPOLIA, MUMBAI, MAINNET, POLYGON]

ZERO_ADDRESS = "0x" + "0" * 40

#
# Environment
#

ETHERSCAN_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"
UPDATE_FRONT_END_ENVVAR = "UPDATE_FRONT_END"
FRONT_END_DIR_ENVVAR = "FRONT_END_DIR"

# RPC endpoints are read by ape-config.yaml, signing keys by the account import script
RPC_URL_ENVVARS = {network: f"{network.upper()}_RPC_URL" for network in PUBLIC_NETWORKS}
PRIVATE_KEY_ENVVARS = {
    network: f"{network.upper()}_PRIVATE_KEY" for network in [LOCALHOST, *PUBLIC_NETWORKS]
}

#
# Front end
#

DEFAULT_FRONT_END_DIR = Path("../ACCOUNTABLE-UI/constants")
FRONT_END_CONTRACTS_FILENAME = "contractAddresses.json"
FRONT_END_ABI_FILENAME = "abi.json"
FRONT_END_ABIS_FILENAME = "abis.json"
FRONT_END_EXTERNAL_CONTRACTS_FILENAME = "externalContractsAddresses.json"

#
# Contracts
#

ACCOUNTABLE_FACTORY = "AccountableFactory"

MOCK_V3_AGGREGATOR = "MockV3Aggregator"
MOCK_WETH_TOKEN = "MockWethToken"
MOCK_WBTC_TOKEN = "MockWbtcToken"
MOCK_USDC_TOKEN = "MockUsdcToken"
MOCK_LINK_TOKEN = "MockLinkToken"
