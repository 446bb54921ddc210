"""The dependency injection container.

A :class:`Container` maps string identifiers to bindings and resolves them on
demand. A binding is one of:

- a literal value, returned verbatim,
- a constructible type, built by auto-wiring its constructor,
- a factory callable, invoked as ``factory(container, args)``,
- an already-built object, stored directly as a singleton instance.

Singleton bindings are cached after their first successful resolution.
Providers group related bindings and are applied with :meth:`Container.register`.
"""

import inspect
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from dibox.builder import InstanceBuilder, to_arg_bag
from dibox.domain import Binding, Factory, TypeRef, Value
from dibox.errors import DependencyError, DependencyNotFoundError
from dibox.provider import Provider
from dibox.registry import TypeRegistry

__all__ = ["Container"]

logger = logging.getLogger(__name__)

_LITERAL_TYPES = (
    str,
    bytes,
    bool,
    int,
    float,
    complex,
    list,
    tuple,
    dict,
    set,
    frozenset,
)

Identifier = Union[str, type]


class Container:
    """Registry of bindings, singleton instances and providers.

    The container gives no internal synchronisation: callers sharing one
    across threads must serialise access to it.

    Example:
        >>> container = Container()
        >>> container.bind("greeting", "Hello world")
        >>> container.singleton("mailer", SmtpMailer)
        >>> container.bind("report", lambda c, args: Report(c.get("mailer"), **args))
        >>> container.get("mailer") is container.get("mailer")
        True
    """

    def __init__(self, types: Optional[TypeRegistry] = None):
        self.types = types if types is not None else TypeRegistry()
        self._builder = InstanceBuilder(self.types)
        self._bindings: dict[str, Binding] = {}
        self._instances: dict[str, Any] = {}
        self._providers: dict[str, Provider] = {}

    def bind(
        self, identifier: Identifier, concrete: Any = None, singleton: bool = False
    ) -> "Container":
        """Bind ``identifier`` to ``concrete``, replacing any previous binding.

        ``concrete`` may be:

        - None or empty: ``identifier`` itself names the type to construct,
        - a class, or a name known to :attr:`types`: the type to construct,
        - a scalar, sequence or mapping literal: returned as-is by ``get``,
        - a non-callable object: cached immediately as a singleton instance,
        - a callable: a factory invoked as ``factory(container, args)``.

        Args:
            identifier: The identifier, or a class standing for its type name.
            concrete: How the dependency is resolved.
            singleton: Whether to cache the first resolved instance. Ignored
                for literals and already-built objects.

        Returns:
            The container, for chaining.
        """
        if concrete is None and inspect.isclass(identifier):
            concrete = identifier
        identifier = self._identifier(identifier)
        self.remove(identifier)

        if concrete is None or (isinstance(concrete, str) and not concrete):
            self._bindings[identifier] = TypeRef(identifier, singleton)
        elif inspect.isclass(concrete) or (
            isinstance(concrete, str) and concrete in self.types
        ):
            self._bindings[identifier] = TypeRef(concrete, singleton)
        elif isinstance(concrete, _LITERAL_TYPES):
            self._bindings[identifier] = Value(concrete)
        elif not callable(concrete):
            self._instances[identifier] = concrete
        else:
            self._bindings[identifier] = Factory(concrete, singleton)

        logger.debug(
            "Bound %r to %r",
            identifier,
            self._bindings.get(identifier, "instance"),
        )
        return self

    def singleton(self, identifier: Identifier, concrete: Any = None) -> "Container":
        """Shorthand for ``bind(identifier, concrete, singleton=True)``."""
        return self.bind(identifier, concrete, True)

    def get(self, identifier: Identifier, args: Any = None) -> Any:
        """Resolve a dependency.

        Args:
            identifier: The identifier to resolve.
            args: Arguments for the factory or constructor, keyed by name
                and/or position. Ignored once a singleton is cached.

        Returns:
            The resolved value.

        Raises:
            DependencyNotFoundError: If nothing is bound to ``identifier``.
            DependencyError: If the binding produces no instance, or the
                bound type cannot be constructed.
        """
        identifier = self._identifier(identifier)

        if identifier in self._instances:
            logger.debug("Returning cached instance of %r", identifier)
            return self._instances[identifier]

        if identifier not in self._bindings:
            raise DependencyNotFoundError(identifier)

        binding = self._bindings[identifier]
        if isinstance(binding, Value):
            return binding.value

        bag = to_arg_bag(args)
        if isinstance(binding, Factory):
            logger.debug("Calling factory for %r", identifier)
            instance = binding.func(self, bag)
        else:
            instance = self.make(binding.type_name, bag)

        if _is_empty(instance):
            raise DependencyError(
                f'Unable to retrieve "{identifier}" dependency. '
                "Bound factory must return an instance."
            )

        if binding.singleton:
            self._instances[identifier] = instance

        return instance

    def has(self, identifier: Identifier) -> bool:
        """Return True when ``identifier`` has a binding or a cached instance."""
        identifier = self._identifier(identifier)
        return identifier in self._bindings or identifier in self._instances

    def remove(self, identifier: Identifier) -> None:
        """Forget the binding and any cached instance of ``identifier``."""
        identifier = self._identifier(identifier)
        self._bindings.pop(identifier, None)
        self._instances.pop(identifier, None)

    def empty(self) -> None:
        """Remove every binding and instance. Providers are kept."""
        self._bindings.clear()
        self._instances.clear()

    def register(self, provider_type: Union[str, type]) -> Provider:
        """Instantiate a provider and let it bind its dependencies.

        Registering the same provider type again runs it again and replaces
        the stored instance.

        Args:
            provider_type: A :class:`Provider` subclass, or a name resolvable
                through :attr:`types`.

        Returns:
            The provider instance.

        Raises:
            DependencyError: If ``provider_type`` is not a concrete provider.
        """
        constructible = self.types.lookup(provider_type)
        cls = constructible.cls if constructible else None
        if cls is None or not issubclass(cls, Provider) or inspect.isabstract(cls):
            raise DependencyError(
                f'"{_provider_name(provider_type)}" must implement '
                f'"{_provider_name(Provider)}" in order to be registered.'
            )

        provider = cls()
        provider.provide(self)

        name = _provider_name(cls)
        self._providers[name] = provider
        logger.debug("Registered provider %r", name)
        return provider

    def get_providers(self) -> Mapping[str, Provider]:
        """Return a read-only view of registered providers, keyed by type name."""
        return MappingProxyType(self._providers)

    def make(self, type_or_name: Union[str, type], args: Any = None) -> Any:
        """Construct a type, auto-wiring its constructor parameters.

        See :meth:`InstanceBuilder.build`. The result is never cached.
        """
        return self._builder.build(type_or_name, args)

    def __getitem__(self, identifier: Identifier) -> Any:
        """Same as ``get(identifier)``."""
        return self.get(identifier)

    def __setitem__(self, identifier: Identifier, concrete: Any) -> None:
        """Same as ``bind(identifier, concrete)``."""
        self.bind(identifier, concrete)

    def __contains__(self, identifier: Identifier) -> bool:
        """Same as ``has(identifier)``."""
        return self.has(identifier)

    def __delitem__(self, identifier: Identifier) -> None:
        """Same as ``remove(identifier)``."""
        self.remove(identifier)

    def _identifier(self, identifier: Identifier) -> str:
        if inspect.isclass(identifier):
            return self.types.type_name(identifier)
        return identifier


def _is_empty(instance: Any) -> bool:
    return instance is None or (isinstance(instance, _LITERAL_TYPES) and not instance)


def _provider_name(target: Any) -> str:
    if inspect.isclass(target):
        return f"{target.__module__}.{target.__qualname__}"
    return str(target)
