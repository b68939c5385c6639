"""Helpers for dealing with logical (api) commands within PlayerDeck."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Coroutine
from dataclasses import MISSING, dataclass
from enum import Enum
from types import NoneType, UnionType
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

from mashumaro.exceptions import MissingField

from playerdeck.constants import DECK_LOGGER_NAME
from playerdeck.models.errors import InvalidCommand

LOGGER = logging.getLogger(f"{DECK_LOGGER_NAME}.api")

_F = TypeVar("_F", bound=Callable[..., Any])


@dataclass
class APICommandHandler:
    """Model for an API command handler."""

    command: str
    signature: inspect.Signature
    type_hints: dict[str, Any]
    target: Callable[..., Coroutine[Any, Any, Any] | Any]

    @classmethod
    def parse(
        cls, command: str, func: Callable[..., Coroutine[Any, Any, Any] | Any]
    ) -> APICommandHandler:
        """Parse APICommandHandler by providing a function."""
        type_hints = get_type_hints(func)
        return APICommandHandler(
            command=command,
            signature=inspect.signature(func),
            type_hints=type_hints,
            target=func,
        )

    async def execute(self, args: dict[str, Any] | None) -> Any:
        """Execute the command with the given (raw) arguments."""
        final_args = parse_arguments(self.signature, self.type_hints, args)
        result = self.target(**final_args)
        if inspect.isawaitable(result):
            result = await result
        return result


def api_command(command: str) -> Callable[[_F], _F]:
    """Decorate a function as logical API command."""

    def decorate(func: _F) -> _F:
        func.api_cmd = command  # type: ignore[attr-defined]
        return func

    return decorate


def collect_api_commands(*instances: object) -> dict[str, APICommandHandler]:
    """Return all methods decorated as api_command within the given class(instances)."""
    handlers: dict[str, APICommandHandler] = {}
    for instance in instances:
        for attr_name in dir(instance):
            if attr_name.startswith("__"):
                continue
            obj = getattr(instance, attr_name)
            if hasattr(obj, "api_cmd"):
                handlers[obj.api_cmd] = APICommandHandler.parse(obj.api_cmd, obj)
    return handlers


def parse_arguments(
    func_sig: inspect.Signature,
    func_types: dict[str, Any],
    args: dict[str, Any] | None,
) -> dict[str, Any]:
    """Parse (and convert) incoming arguments to correct types."""
    if args is None:
        args = {}
    for key in args:
        if key not in func_sig.parameters:
            raise InvalidCommand(f"Invalid parameter: '{key}'")
    final_args = {}
    for name, param in func_sig.parameters.items():
        value = args.get(name)
        default = MISSING if param.default is inspect.Parameter.empty else param.default
        try:
            final_args[name] = parse_value(name, value, func_types[name], default)
        except (KeyError, TypeError, ValueError, MissingField) as err:
            raise InvalidCommand(str(err)) from err
    return final_args


def parse_value(name: str, value: Any, value_type: Any, default: Any = MISSING) -> Any:
    """Try to parse a value from raw (json) data and type annotations."""
    if isinstance(value, dict) and hasattr(value_type, "from_dict"):
        return value_type.from_dict(value)
    if value is None and default is not MISSING:
        return default
    if value is None and value_type is NoneType:
        return None
    origin = get_origin(value_type)
    if origin in (tuple, list):
        return origin(parse_value(name, subvalue, get_args(value_type)[0]) for subvalue in value)
    if origin is Union or origin is UnionType:
        sub_value_types = get_args(value_type)
        if value is None and NoneType in sub_value_types:
            return None
        for sub_arg_type in sub_value_types:
            if sub_arg_type is NoneType:
                continue
            try:
                return parse_value(name, value, sub_arg_type)
            except (KeyError, TypeError, ValueError, MissingField):
                pass
        msg = (
            f"Value {value} of type {type(value)} is invalid for {name}, "
            f"expected value of type {value_type}"
        )
        raise TypeError(msg)
    if value_type is Any:
        return value
    if value is None:
        msg = f"`{name}` of type `{value_type}` is required."
        raise KeyError(msg)
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        return value_type(value)
    if value_type is float and isinstance(value, int):
        return float(value)
    if isinstance(value_type, type) and not isinstance(value, value_type):
        msg = f"Value {value} of type {type(value)} is invalid for {name}, expected {value_type}"
        raise TypeError(msg)
    return value
