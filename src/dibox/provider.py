"""Base class for units of grouped bindings."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dibox.container import Container

__all__ = ["Provider"]


class Provider(ABC):
    """Contributes bindings to a container when registered.

    Providers are default-constructed by :meth:`Container.register`, so
    subclasses must not require constructor arguments.

    Example:
        >>> class MailProvider(Provider):
        ...     def provide(self, container):
        ...         container.singleton("mailer", SmtpMailer)
        >>>
        >>> container.register(MailProvider)
    """

    @abstractmethod
    def provide(self, container: "Container") -> None:
        """Bind this provider's dependencies into ``container``."""
