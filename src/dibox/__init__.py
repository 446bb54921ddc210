"""dibox: a small dependency injection container.

dibox maps string identifiers to literal values, factory callables or
constructible classes, resolves them on demand and optionally caches them as
singletons. Classes are auto-wired: constructor parameters declared with a
class type are built recursively, everything else comes from the arguments
supplied at resolution time or from parameter defaults.

Key Features:
    - Literal, factory, type and instance bindings behind one ``bind`` call
    - Singleton caching on first successful resolution
    - Constructor auto-wiring with by-name, then by-position argument matching
    - Providers grouping related bindings
    - Mapping-style access (``container["id"]``)

Basic Usage:
    >>> from dibox import Container
    >>>
    >>> container = Container()
    >>> container.bind("greeting", "Hello world")
    >>> container.singleton("repository", UserRepository)
    >>> container.bind("service", lambda c, args: UserService(c.get("repository")))
    >>>
    >>> service = container.get("service")

The package consists of several modules:
    - container: The Container and its resolution logic
    - builder: Auto-wiring construction of registered types
    - registry: The table of constructible types and their parameters
    - provider: The Provider base class
    - domain: Binding descriptors and constructor parameters
    - errors: Container exceptions
"""

import logging

from dibox.builder import InstanceBuilder
from dibox.container import Container
from dibox.errors import DependencyError, DependencyNotFoundError
from dibox.provider import Provider
from dibox.registry import ConstructibleType, TypeRegistry

__all__ = [
    "Container",
    "ConstructibleType",
    "DependencyError",
    "DependencyNotFoundError",
    "InstanceBuilder",
    "Provider",
    "TypeRegistry",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
