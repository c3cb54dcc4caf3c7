"""Ok / Err outcome values.

Ledger operations that can be rejected return ``Ok[T] | Err[E]`` instead of
raising. Callers pattern-match on the variant::

    match ledger.deposit(req):
        case Ok(ExecuteResult.APPLIED): ...
        case Ok(ExecuteResult.ALREADY_APPLIED): ...
        case Err(error): ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, NoReturn, final


@final
@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:  # noqa: ARG002
        return self

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value


@final
@dataclass(frozen=True, slots=True)
class Err[E]:
    """Carries an error value, never an exception."""

    error: E

    def map(self, f: Callable[[Any], Any]) -> Err[E]:  # noqa: ARG002
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        return Err(f(self.error))

    def unwrap(self) -> NoReturn:
        raise RuntimeError(f"unwrap on Err: {self.error}")

    def unwrap_or[T](self, default: T) -> T:
        return default


type Result[T, E] = Ok[T] | Err[E]


def unwrap[T](result: Ok[T] | Err[Any]) -> T:
    """Ok value, or RuntimeError. For tests and process boundaries."""
    match result:
        case Ok(value):
            return value
        case Err():
            return result.unwrap()
    raise TypeError(f"expected Ok or Err, got {type(result).__name__}")
