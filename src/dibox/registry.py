"""Registration and introspection of constructible types."""

import builtins
import importlib
import inspect
import logging
from dataclasses import dataclass
from types import SimpleNamespace, UnionType
from typing import (
    Annotated,
    Any,
    Callable,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from dibox.domain import Parameter

__all__ = ["ConstructibleType", "TypeRegistry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConstructibleType:
    """A class the container may instantiate, with its constructor parameters.

    The parameter list is computed once, when the class is registered, so
    resolution never has to inspect the class again.

    Attributes:
        name: The name under which the class is registered.
        cls: The class itself.
        parameters: Constructor parameters in declaration order, excluding
            ``*args`` and ``**kwargs``.
        introspectable: False when the constructor signature cannot be read,
            as for some classes implemented in C.
    """

    name: str
    cls: type
    parameters: list[Parameter]
    introspectable: bool = True


class TypeRegistry:
    """Table of constructible types, addressable by name or by class."""

    def __init__(self):
        self._by_name: dict[str, ConstructibleType] = {}
        self._by_class: dict[type, ConstructibleType] = {}

    def register(self, cls: type, name: Optional[str] = None) -> ConstructibleType:
        """Register a class explicitly, overwriting any type of the same name.

        Args:
            cls: The class to register.
            name: Optional name; defaults to the class's qualified name.

        Returns:
            The introspected :class:`ConstructibleType`.
        """
        parameters = _get_parameters(cls)
        constructible = ConstructibleType(
            name or cls.__qualname__, cls, parameters or [], parameters is not None
        )
        self._by_name[constructible.name] = constructible
        self._by_class[cls] = constructible
        logger.debug(
            "Registered type %r with parameters %s",
            constructible.name,
            [p.name for p in constructible.parameters],
        )
        return constructible

    def constructible(self, name: Optional[str] = None) -> Callable:
        """Decorator to register a class as constructible.

        Example:
            @types.constructible()
            class Mailer:
                def __init__(self, transport: Transport): ...
        """

        def decorator(cls: type) -> type:
            self.register(cls, name)
            return cls

        return decorator

    def lookup(self, target: Union[str, type]) -> Optional[ConstructibleType]:
        """Find a constructible type by class, registered name or dotted path.

        Classes are registered on first sight. Names unknown to the table are
        tried as ``"package.module.Class"`` import paths.

        Returns:
            The matching type, or None when nothing matches.
        """
        if inspect.isclass(target):
            return self._by_class.get(target) or self._remember(target)

        if not isinstance(target, str) or not target:
            return None

        if target in self._by_name:
            return self._by_name[target]

        imported = _import_type(target)
        if imported is None:
            return None
        return self._by_class.get(imported) or self._remember(imported, target)

    def type_name(self, cls: type) -> str:
        """Return the name ``cls`` is registered under, registering it if needed."""
        return self.lookup(cls).name

    def __contains__(self, target: Union[str, type]) -> bool:
        return self.lookup(target) is not None

    def _remember(self, cls: type, name: Optional[str] = None) -> ConstructibleType:
        name = name or cls.__qualname__
        if name in self._by_name:
            # the short name belongs to another class
            name = f"{cls.__module__}.{cls.__qualname__}"
        return self.register(cls, name)


def _import_type(dotted_name: str) -> Optional[type]:
    parts = dotted_name.split(".")
    if len(parts) < 2 or not all(part.isidentifier() for part in parts):
        return None

    module_name, _, attribute = dotted_name.rpartition(".")
    try:
        module = importlib.import_module(module_name)
    except (ImportError, TypeError, ValueError):
        return None
    target = getattr(module, attribute, None)
    return target if inspect.isclass(target) else None


def _get_parameters(cls: type) -> Optional[list[Parameter]]:
    """Extract the constructor parameters of a class.

    Annotations are evaluated with ``get_type_hints``; when that fails (a
    forward reference to a name not importable from the class's module) each
    annotation is evaluated on its own, unresolvable ones are kept as
    strings and resolved by name at construction time.

    Returns None when the signature cannot be read.

    Example:
        >>> class Service:
        ...     def __init__(self, db: Database, name: str = "svc", cache: Optional[Cache] = None): ...
        >>> _get_parameters(Service)
        >>> # [Parameter("db", Database, EMPTY, POSITIONAL_OR_KEYWORD, False),
        >>> #  Parameter("name", str, "svc", POSITIONAL_OR_KEYWORD, True),
        >>> #  Parameter("cache", Cache, None, POSITIONAL_OR_KEYWORD, False)]
    """
    try:
        sig = inspect.signature(cls)
    except (TypeError, ValueError):
        return None

    initializer = cls.__init__
    try:
        hints = get_type_hints(initializer, include_extras=True)
    except (NameError, TypeError):
        hints = _evaluate_each(initializer)

    return [
        _make_parameter(param, hints.get(name))
        for name, param in sig.parameters.items()
        if param.kind not in (param.VAR_POSITIONAL, param.VAR_KEYWORD)
    ]


def _evaluate_each(initializer: Callable) -> dict[str, Any]:
    globalns = getattr(initializer, "__globals__", {})
    hints = {}
    for name, annotation in getattr(initializer, "__annotations__", {}).items():
        holder = SimpleNamespace(__annotations__={name: annotation})
        try:
            hints.update(
                get_type_hints(holder, globalns=globalns, include_extras=True)
            )
        except (NameError, TypeError):
            hints[name] = annotation
    return hints


def _make_parameter(param: inspect.Parameter, annotation: Any) -> Parameter:
    declared_type = _unwrap(annotation)
    return Parameter(
        param.name,
        declared_type,
        param.default,
        param.kind,
        _is_builtin(declared_type),
    )


def _unwrap(annotation: Any) -> Any:
    if annotation is None or annotation is inspect.Parameter.empty:
        return None

    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    if get_origin(annotation) in (Union, UnionType):
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            annotation = members[0]

    return annotation


def _is_builtin(declared_type: Any) -> bool:
    if declared_type is None:
        return True
    if isinstance(declared_type, str):
        return isinstance(getattr(builtins, declared_type, None), type)
    if get_origin(declared_type) is not None:
        return True
    return (
        not inspect.isclass(declared_type) or declared_type.__module__ == "builtins"
    )
