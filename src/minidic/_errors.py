from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Sequence


class ContainerError(Exception):
    """Base class for every error raised by a container."""


class UnknownIdentifierError(ContainerError, KeyError):
    def __init__(self, injection_id: str) -> None:
        super().__init__(injection_id)
        self.injection_id = injection_id

    def __str__(self) -> str:
        # KeyError would otherwise render the repr of the id only
        return f"Unknown injection id {self.injection_id!r}"


class InvalidFactorySignatureError(ContainerError, TypeError):
    def __init__(self, injection_id: str, detected_arg_kind: str) -> None:
        msg = (
            f"Factory for injection id {injection_id!r} must accept the container "
            f"as its first argument, got {detected_arg_kind}"
        )
        super().__init__(msg)
        self.injection_id = injection_id
        self.detected_arg_kind = detected_arg_kind


class ExtendedTargetNotCallableError(ContainerError, TypeError):
    def __init__(self, injection_id: str) -> None:
        msg = f"Extended injection id {injection_id!r} is not mapped to a callable"
        super().__init__(msg)
        self.injection_id = injection_id


class ExtensionNotCallableError(ContainerError, TypeError):
    def __init__(self, injection_id: str) -> None:
        msg = f"Extension of injection id {injection_id!r} is not callable"
        super().__init__(msg)
        self.injection_id = injection_id


class CyclicDependencyError(ContainerError, RecursionError):
    """Raised when an injection depends, directly or transitively, on itself."""

    def __init__(self, chain: Sequence[str]) -> None:
        msg = f"Cyclic dependency detected: {' -> '.join(chain)}"
        super().__init__(msg)
        self.chain = tuple(chain)
