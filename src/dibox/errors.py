__all__ = ["DependencyError", "DependencyNotFoundError"]


class DependencyError(Exception):
    """Raised when a dependency cannot be bound, constructed or registered."""

    pass


class DependencyNotFoundError(DependencyError, LookupError):
    """Raised when an identifier has neither a binding nor a cached instance."""

    def __init__(self, identifier: str):
        super().__init__(f'Dependency "{identifier}" not found.')
        self.identifier = identifier
