"""Auto-wiring construction of registered types."""

import inspect
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from dibox.domain import Parameter
from dibox.errors import DependencyError
from dibox.registry import ConstructibleType, TypeRegistry

__all__ = ["ArgBag", "InstanceBuilder", "to_arg_bag"]

logger = logging.getLogger(__name__)

ArgBag = dict[Union[int, str], Any]


def to_arg_bag(args: Any) -> ArgBag:
    """Normalise caller arguments into a fresh bag keyed by index and/or name.

    ``None`` is the empty bag, a list or tuple is read as positional indices,
    and any mapping is copied as-is.
    """
    if args is None:
        return {}
    if isinstance(args, Mapping):
        return dict(args)
    if isinstance(args, (list, tuple)):
        return dict(enumerate(args))
    raise TypeError(
        f"Arguments must be a mapping or a sequence, not {type(args).__name__}"
    )


class InstanceBuilder:
    """Construct instances of registered types, auto-wiring their parameters."""

    def __init__(self, types: TypeRegistry):
        self._types = types

    def build(self, target: Union[str, type], args: Any = None) -> Any:
        """Instantiate ``target``, resolving each constructor parameter in turn.

        Each parameter takes, in order of preference: the argument named after
        it, the argument at its position, a recursively built instance of its
        declared class, or its default value. Nothing is cached.

        Args:
            target: A class, a registered type name or a dotted import path.
            args: Arguments keyed by parameter name and/or position.

        Returns:
            The constructed instance.

        Raises:
            DependencyError: If the type is unknown or not instantiable, or if
                a required parameter cannot be resolved.
        """
        constructible = self._types.lookup(target)
        if constructible is None:
            raise DependencyError(f'Class "{_display_name(target)}" does not exists.')
        if not (constructible.introspectable and _is_instantiable(constructible.cls)):
            raise DependencyError(
                f'Class "{constructible.name}" is not an instantiable class.'
            )

        bag = to_arg_bag(args)
        call_args = []
        call_kwargs = {}
        for index, parameter in enumerate(constructible.parameters):
            value = self._resolve(constructible, index, parameter, bag)
            if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                call_args.append(value)
            else:
                call_kwargs[parameter.name] = value

        logger.debug("Constructing %r", constructible.name)
        return constructible.cls(*call_args, **call_kwargs)

    def _resolve(
        self,
        constructible: ConstructibleType,
        index: int,
        parameter: Parameter,
        bag: ArgBag,
    ) -> Any:
        if parameter.name in bag:
            return bag[parameter.name]
        if index in bag:
            return bag[index]

        if not parameter.is_builtin:
            try:
                return self.build(parameter.declared_type)
            except DependencyError as e:
                if not parameter.has_default:
                    raise
                logger.debug(
                    "Using default for %r in %r: %s",
                    parameter.name,
                    constructible.name,
                    e,
                )
                return parameter.default

        if parameter.has_default:
            return parameter.default

        raise DependencyError(
            f'Could not resolve parameter "{parameter.name}" '
            f'in "{constructible.name}" class.'
        )


def _is_instantiable(cls: type) -> bool:
    return (
        inspect.isclass(cls)
        and not inspect.isabstract(cls)
        and not getattr(cls, "_is_protocol", False)
    )


def _display_name(target: Optional[Any]) -> str:
    if isinstance(target, str):
        return target
    return getattr(target, "__qualname__", repr(target))
