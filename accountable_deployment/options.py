from pathlib import Path

import click

from accountable_deployment.constants import (
    CONSTRUCTOR_PARAMS_DIR,
    ETHERSCAN_API_KEY_ENVVAR,
    FRONT_END_DIR_ENVVAR,
    UPDATE_FRONT_END_ENVVAR,
)

params_file_option = click.option(
    "--params-file",
    "-p",
    help="Deployment parameters YAML file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=CONSTRUCTOR_PARAMS_DIR / "accountable.yml",
    show_default=True,
)

mocks_file_option = click.option(
    "--mocks-file",
    "-m",
    help="Mock contracts parameters YAML file.",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    default=CONSTRUCTOR_PARAMS_DIR / "mocks.yml",
    show_default=True,
)

autosign_option = click.option(
    "--autosign",
    help="Sign transactions without prompting for confirmation.",
    is_flag=True,
    default=False,
)

update_front_end_option = click.option(
    "--update-front-end/--no-update-front-end",
    help="Merge the deployed addresses and ABIs into the front end artifacts.",
    envvar=UPDATE_FRONT_END_ENVVAR,
    show_envvar=True,
    default=False,
)

front_end_dir_option = click.option(
    "--front-end-dir",
    help="Directory holding the front end artifacts; overrides the params file.",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=FRONT_END_DIR_ENVVAR,
    show_envvar=True,
    required=False,
)

etherscan_api_key_option = click.option(
    "--etherscan-api-key",
    help="Block explorer API key; enables source verification on public networks.",
    envvar=ETHERSCAN_API_KEY_ENVVAR,
    show_envvar=True,
    required=False,
)

unit_names_option = click.option(
    "--contract-name",
    "-c",
    "unit_names",
    help="Contract to act on; defaults to every contract in the params file.",
    type=click.STRING,
    multiple=True,
    required=False,
)
