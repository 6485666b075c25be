from __future__ import annotations

import inspect
import logging
import types
import typing
from dataclasses import dataclass, replace
from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    Union,
    cast,
    get_type_hints,
    overload,
)

from ._errors import (
    ContainerError,
    CyclicDependencyError,
    ExtendedTargetNotCallableError,
    ExtensionNotCallableError,
    InvalidFactorySignatureError,
    UnknownIdentifierError,
)
from ._injection import Injection, Lifetime


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


_UNSET: Any = object()


@dataclass(frozen=True)
class Resolution:
    """Outcome of `Container.try_get`: either a value or the error that stopped it."""

    value: Any = None
    error: ContainerError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class Container:
    """Minimal service locator.

    - register plain values or factories under string ids
    - factories run lazily and their result is cached (singleton)
      unless the injection is a factory (transient)
    - protected callables are handed out as they are
    - factories receive the container, or the resolved values of
      an explicit dependency list
    - registered factories can be extended with decorators.
    """

    def __init__(self) -> None:
        self._injections: dict[str, Injection] = {}
        self._cache: dict[str, object] = {}
        self._resolving: list[str] = []

    @overload
    def add(self, injection: Injection) -> None: ...

    @overload
    def add(
        self,
        injection: str,
        value: object,
        *,
        dependencies: Iterable[str] | None = ...,
        lifetime: Lifetime = ...,
        protected: bool = ...,
    ) -> None: ...

    def add(
        self,
        injection: Injection | str,
        value: object = _UNSET,
        *,
        dependencies: Iterable[str] | None = None,
        lifetime: Lifetime = Lifetime.SINGLETON,
        protected: bool = False,
    ) -> None:
        """Register an injection, replacing any previous one with the same id.

        Example:
          container.add(Injection("db", create_db))
          container.add("dsn", "sqlite://")
          container.add("repo", Repo, dependencies=["db"])

        """
        if isinstance(injection, Injection):
            if value is not _UNSET or dependencies is not None or protected or lifetime is not Lifetime.SINGLETON:
                msg = "Options cannot be combined with an `Injection` instance."
                raise ValueError(msg)
        elif isinstance(injection, str):
            if value is _UNSET:
                msg = f"A value must be provided for injection id {injection!r}."
                raise ValueError(msg)
            injection = Injection(
                injection,
                value,
                dependencies=dependencies,  # type: ignore[arg-type]
                lifetime=lifetime,
                protected=protected,
            )
        else:
            msg = f"`Container.add()` expects an Injection or an id, got {injection!r}"
            raise TypeError(msg)

        # registry owns its copy; builder calls on the caller's record do not reach it
        self._injections[injection.injection_id] = replace(injection)
        self._forget(injection.injection_id)

    def has(self, injection_id: str) -> bool:
        return injection_id in self._injections

    def __contains__(self, injection_id: object) -> bool:
        return injection_id in self._injections

    def delete(self, injection_id: str) -> None:
        """Remove an injection and its cached result."""
        if injection_id not in self._injections:
            raise UnknownIdentifierError(injection_id)

        del self._injections[injection_id]
        self._forget(injection_id)

    def get(self, injection_id: str) -> Any:
        """Resolve an id, raising the `ContainerError` that prevented it."""
        return self.try_get(injection_id).unwrap()

    def try_get(self, injection_id: str) -> Resolution:
        """Resolve an id without raising container errors.

        Errors raised by the factories themselves (other than container
        errors from nested lookups) still propagate.
        """
        try:
            value = self._resolve(injection_id)
        except ContainerError as e:
            return Resolution(error=e)
        return Resolution(value=value)

    def extend(self, injection_id: str, extension: Callable[..., object]) -> None:
        """Wrap a registered factory so `extension(container, result)` post-processes its result.

        Extensions stack: the first one registered runs first.
        """
        injection = self._injections.get(injection_id)
        if injection is None:
            raise UnknownIdentifierError(injection_id)
        if not callable(injection.value):
            raise ExtendedTargetNotCallableError(injection_id)
        if not callable(extension):
            raise ExtensionNotCallableError(injection_id)

        extended = replace(injection, dependencies=None)

        def composed(container: Container) -> object:
            result = container._invoke(injection)  # noqa: SLF001
            return container._call_with_container(injection_id, extension, result)  # noqa: SLF001

        extended.value = composed
        self._injections[injection_id] = extended
        self._forget(injection_id)

    def _resolve(self, injection_id: str) -> object:
        if injection_id in self._cache:
            return self._cache[injection_id]

        injection = self._injections.get(injection_id)
        if injection is None:
            raise UnknownIdentifierError(injection_id)

        if not injection.invocable:
            return injection.value

        if injection_id in self._resolving:
            start = self._resolving.index(injection_id)
            raise CyclicDependencyError([*self._resolving[start:], injection_id])

        self._resolving.append(injection_id)
        try:
            result = self._invoke(injection)
        finally:
            self._resolving.pop()

        if injection.lifetime is Lifetime.SINGLETON:
            self._cache[injection_id] = result

        return result

    def _invoke(self, injection: Injection) -> object:
        function = cast("Callable[..., object]", injection.value)
        logger.debug("Invoking factory for %r", injection.injection_id)

        if injection.dependencies is None:
            return self._call_with_container(injection.injection_id, function)

        args = [self.try_get(dependency_id).unwrap() for dependency_id in injection.dependencies]
        return function(*args)

    def _call_with_container(self, injection_id: str, function: Callable[..., object], *args: object) -> object:
        mismatch = _container_argument_mismatch(self, function)
        if mismatch is not None:
            raise InvalidFactorySignatureError(injection_id, mismatch)
        return function(self, *args)

    def _forget(self, injection_id: str) -> None:
        if self._cache.pop(injection_id, _UNSET) is not _UNSET:
            logger.debug("Dropped cached result for %r", injection_id)


def _container_argument_mismatch(container: Container, function: Callable[..., object]) -> str | None:
    """Describe why `function` cannot take the container first, or None if it can."""
    try:
        sig = inspect.signature(function)
    except (TypeError, ValueError):
        # Not introspectable (some builtins): let the call itself decide.
        return None

    params = list(sig.parameters.values())
    if not params:
        return "no parameters"

    first = params[0]
    if first.kind in (inspect.Parameter.KEYWORD_ONLY, inspect.Parameter.VAR_KEYWORD):
        return f"keyword-only parameter '{first.name}'"

    annotation = _get_parameter_annotation(function, first)
    if _accepts_container(container, annotation):
        return None

    return _describe_annotation(annotation)


def _get_parameter_annotation(function: Callable[..., object], param: inspect.Parameter) -> Any:
    if not isinstance(param.annotation, str):
        return param.annotation

    # a class signature comes from __init__; the class itself holds attribute hints
    target = inspect.getattr_static(function, "__init__") if inspect.isclass(function) else function

    try:
        hints = get_type_hints(target)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning(
            "'%s' name error retrieving %s type hints",
            exc.name,
            getattr(function, "__qualname__", repr(function)),
        )
        hints = {}

    return hints.get(param.name, param.annotation)


def _accepts_container(container: Container, annotation: Any) -> bool:
    if annotation is inspect.Parameter.empty or annotation is Any:
        return True

    if isinstance(annotation, str):
        # Postponed annotation that could not be evaluated: compare by name.
        name = annotation.strip("'\"").rsplit(".", 1)[-1]
        return name in {cls.__name__ for cls in type(container).__mro__}

    if typing.get_origin(annotation) in (Union, types.UnionType):
        return any(_accepts_container(container, arg) for arg in typing.get_args(annotation))

    if inspect.isclass(annotation):
        try:
            return isinstance(container, annotation)
        except TypeError:
            # non runtime-checkable protocols refuse isinstance(); trust them
            return _is_protocol(annotation)

    return False


def _describe_annotation(annotation: Any) -> str:
    if inspect.isclass(annotation):
        return annotation.__name__
    return repr(annotation)


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def _is_protocol(tp: type) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def _is_protocol(tp: type) -> bool:
        """Detect whether 'tp' is a typing.Protocol subclass (safe)."""
        if not inspect.isclass(tp):
            return False
        try:
            return issubclass(tp, cast("type", Protocol))
        except TypeError:
            # parameterized generics such as list[int] on 3.10
            return False
