from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable


class Lifetime(Enum):
    SINGLETON = "singleton"
    TRANSIENT = "transient"


@dataclass
class Injection:
    """A named registration: a value or factory plus how to resolve it.

    Example:
      Injection("db", create_db)
      Injection("mailer", make_mailer).with_dependencies(["db", "smtp_host"])
      Injection("request_id", next_id).as_factory()
      Injection("on_error", log_error).as_protected()

    """

    injection_id: str
    value: object
    dependencies: tuple[str, ...] | None = None
    lifetime: Lifetime = Lifetime.SINGLETON
    protected: bool = False  # callable value is returned, never invoked

    def __post_init__(self) -> None:
        if self.dependencies is not None:
            self.dependencies = _id_tuple(self.dependencies)

    def as_factory(self) -> Injection:
        """Re-invoke the value on every resolution instead of caching it."""
        self.lifetime = Lifetime.TRANSIENT
        return self

    def as_protected(self) -> Injection:
        self.protected = True
        return self

    def with_dependencies(self, injection_ids: Iterable[str]) -> Injection:
        """Call the value with these resolved ids instead of the container."""
        self.dependencies = _id_tuple(injection_ids)
        return self

    @property
    def is_factory(self) -> bool:
        return self.lifetime is Lifetime.TRANSIENT

    @property
    def invocable(self) -> bool:
        return callable(self.value) and not self.protected


def _id_tuple(injection_ids: Iterable[str]) -> tuple[str, ...]:
    if isinstance(injection_ids, str):
        # a bare id would otherwise be split into characters
        msg = f"Dependencies must be a sequence of ids, got the string {injection_ids!r}"
        raise TypeError(msg)
    return tuple(injection_ids)
