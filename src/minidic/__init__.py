"""Minimal service locator.

This package provides a small dependency injection container for Python that maps
string ids to plain values or factory functions. Factories are resolved lazily on
first access and, unless marked as factories, their result is cached.

Exports:
- `Container`: Registry resolving ids, with `add`, `get`, `try_get`, `has`,
  `delete` and `extend`.
- `Injection`: A named registration; `as_factory()`, `as_protected()` and
  `with_dependencies()` tune how it resolves.
- `Lifetime`: Enum for caching behaviour (singleton or transient).
- `Resolution`: Result of the non-raising `Container.try_get`.
- Errors: `ContainerError` and its subclasses.
"""

from ._container import Container, Resolution
from ._errors import (
    ContainerError,
    CyclicDependencyError,
    ExtendedTargetNotCallableError,
    ExtensionNotCallableError,
    InvalidFactorySignatureError,
    UnknownIdentifierError,
)
from ._injection import Injection, Lifetime


__all__ = [
    "Container",
    "ContainerError",
    "CyclicDependencyError",
    "ExtendedTargetNotCallableError",
    "ExtensionNotCallableError",
    "Injection",
    "InvalidFactorySignatureError",
    "Lifetime",
    "Resolution",
    "UnknownIdentifierError",
]
