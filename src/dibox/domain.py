"""Domain models used throughout the container."""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union


@dataclass(frozen=True)
class Value:
    """A literal bound verbatim: returned by ``get`` without any resolution.

    Attributes:
        value: The scalar, sequence or mapping that was bound.
    """

    value: Any


@dataclass(frozen=True)
class TypeRef:
    """A binding resolved by constructing a class known to the type registry.

    Attributes:
        type_name: The registry name (or class) handed to ``make``.
        singleton: Whether the first constructed instance is cached.
    """

    type_name: Union[str, type]
    singleton: bool = False


@dataclass(frozen=True)
class Factory:
    """A binding resolved by calling ``func(container, args)``.

    Attributes:
        func: The factory callable.
        singleton: Whether the first returned value is cached.
    """

    func: Callable[..., Any]
    singleton: bool = False


Binding = Union[Value, TypeRef, Factory]


@dataclass(frozen=True)
class Parameter:
    """A constructor parameter of a constructible type.

    Attributes:
        name: The parameter name in the constructor signature.
        declared_type: The resolved annotation, a string for an unresolved
            forward reference, or None when unannotated.
        default: The default value, or ``Parameter.EMPTY`` when required.
        kind: The ``inspect.Parameter`` kind.
        is_builtin: True when the parameter is never auto-wired.
    """

    EMPTY = inspect.Parameter.empty

    name: str
    declared_type: Optional[Any]
    default: Any
    kind: Any
    is_builtin: bool

    @property
    def has_default(self) -> bool:
        return self.default is not Parameter.EMPTY
