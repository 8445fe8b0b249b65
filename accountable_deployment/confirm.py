import sys
from collections import OrderedDict

from accountable_deployment.constants import ZERO_ADDRESS


def _abort() -> None:
    print("Aborting deployment!")
    sys.exit(-1)


def _confirm_deployment(unit_name: str) -> None:
    """Asks the user to confirm the deployment of a single unit."""
    answer = input(f"Deploy {unit_name} Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected for deployment parameter; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        _abort()


def _contains_zero_address(value) -> bool:
    if isinstance(value, list):
        return any(_contains_zero_address(v) for v in value)
    return value == ZERO_ADDRESS


def _confirm_resolution(resolved_params: OrderedDict, unit_name: str) -> None:
    """Asks the user to confirm the resolved constructor parameters for a single unit."""
    if len(resolved_params) == 0:
        print(f"\n(i) No constructor parameters for {unit_name}")
        _confirm_deployment(unit_name)
        return

    print(f"\nConstructor parameters for {unit_name}")
    contains_zero_address = False
    for name, resolved_value in resolved_params.items():
        print(f"\t{name}={resolved_value}")
        if not contains_zero_address:
            contains_zero_address = _contains_zero_address(resolved_value)
    _confirm_deployment(unit_name)
    if contains_zero_address:
        _confirm_zero_address()
