import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, Iterator, List, Sequence

from eth_typing import ChecksumAddress

from accountable_deployment.errors import InvalidUnitSpec, UnknownDependency
from accountable_deployment.types import DependencyName, UnitName
from accountable_deployment.utils import _load_yaml, validate_config

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"


class VariableContext:
    def __init__(self, unit_name: UnitName, constants: typing.Dict[str, Any] = None):
        self.unit_name = unit_name
        self.constants = constants or dict()


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self, addresses: Iterator[ChecksumAddress]) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise InvalidUnitSpec(
                f"Constant '{constant_name}' not found in deployment file.",
                unit_name=context.unit_name,
            )

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self, addresses: Iterator[ChecksumAddress]) -> Any:
        return self.constant_value


class Dependency(Variable):
    """A reference to an external contract, resolved per network."""

    def __init__(self, dependency_name: str, context: VariableContext):
        try:
            self.dependency = DependencyName.from_name(dependency_name)
        except UnknownDependency as e:
            raise e.with_context(unit_name=context.unit_name, chain_id=None)

    def resolve(self, addresses: Iterator[ChecksumAddress]) -> Any:
        # addresses arrive in declaration order, one per dependency reference
        return next(addresses)

    def __repr__(self) -> str:
        return f"{self.VARIABLE_PREFIX}{self.dependency.value}"


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if Constant.is_constant(variable):
        return Constant(variable, context)
    return Dependency(variable, context)


def _process_raw_value(value: Any, context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, context)

    return value


def _process_raw_values(values: Dict, context: VariableContext) -> OrderedDict:
    processed_parameters = OrderedDict()
    for name, value in values.items():
        processed_parameters[name] = _process_raw_value(value, context)
    return processed_parameters


def _collect_dependencies(value: Any, dependencies: List[DependencyName]) -> None:
    if isinstance(value, list):
        for v in value:
            _collect_dependencies(v, dependencies)
    elif isinstance(value, Dependency):
        dependencies.append(value.dependency)


def _resolve_param(value: Any, addresses: Iterator[ChecksumAddress]) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v, addresses) for v in value]

    if isinstance(value, Variable):
        return value.resolve(addresses)

    return value  # literally a value


class DeployableUnitSpec:
    """
    One unit to provision: its name and its constructor parameters in declaration order.

    The order of the parameters is the order of the constructor arguments; the
    dependencies the unit requires are the dependency references found walking
    those parameters depth-first.
    """

    def __init__(self, name: UnitName, parameters: typing.Optional[OrderedDict] = None):
        if not name:
            raise InvalidUnitSpec("Unit spec requires a name.")
        self.name = name
        self.parameters = OrderedDict(parameters or dict())

    def __repr__(self) -> str:
        return f"DeployableUnitSpec({self.name})"

    @property
    def dependencies(self) -> List[DependencyName]:
        dependencies = list()
        for value in self.parameters.values():
            _collect_dependencies(value, dependencies)
        return dependencies

    def resolve(self, addresses: Sequence[ChecksumAddress]) -> OrderedDict:
        """
        Interleaves resolved dependency addresses (in the order of `dependencies`)
        with the literal parameters, returning the named constructor parameters.
        """
        expected = len(self.dependencies)
        if len(addresses) != expected:
            raise InvalidUnitSpec(
                f"Expected {expected} resolved address(es), got {len(addresses)}",
                unit_name=self.name,
            )
        addresses = iter(addresses)
        resolved_parameters = OrderedDict()
        for name, value in self.parameters.items():
            resolved_parameters[name] = _resolve_param(value, addresses)
        return resolved_parameters

    def arguments(self, addresses: Sequence[ChecksumAddress]) -> List[Any]:
        """Returns the constructor argument vector."""
        return list(self.resolve(addresses).values())

    @classmethod
    def from_config(
        cls, contract_info, constants: typing.Optional[Dict[str, Any]] = None
    ) -> "DeployableUnitSpec":
        if isinstance(contract_info, str):
            return cls(name=contract_info)

        if not isinstance(contract_info, dict) or len(contract_info) != 1:
            raise InvalidUnitSpec("Malformed constructor parameters YAML.")

        unit_name = list(contract_info.keys())[0]  # only one entry
        contract_data = contract_info[unit_name] or dict()
        raw_parameters = contract_data.get(CONTRACT_CONSTRUCTOR_PARAMETER_KEY) or dict()
        if not isinstance(raw_parameters, dict):
            raise InvalidUnitSpec("Malformed constructor parameters.", unit_name=unit_name)

        context = VariableContext(unit_name=unit_name, constants=constants)
        parameters = _process_raw_values(raw_parameters, context)
        return cls(name=unit_name, parameters=parameters)


def unit_specs_from_config(config: Dict) -> List[DeployableUnitSpec]:
    """Loads the ordered unit specs of a deployment params file."""
    print("Processing contract constructor parameters...")
    validate_config(config)
    constants = config.get("constants")

    specs = list()
    names = set()
    for contract_info in config["contracts"]:
        spec = DeployableUnitSpec.from_config(contract_info, constants=constants)
        if spec.name in names:
            raise InvalidUnitSpec("Duplicate unit in params file.", unit_name=spec.name)
        names.add(spec.name)
        specs.append(spec)
    return specs


def unit_specs_from_yaml(filepath: Path) -> List[DeployableUnitSpec]:
    return unit_specs_from_config(_load_yaml(filepath))
