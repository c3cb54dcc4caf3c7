"""Value types shared across tally: the ledger clock's UtcDatetime and FrozenMap."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from operator import itemgetter
from typing import Any, ClassVar, final

from tally.core.result import Err, Ok


@final
@dataclass(frozen=True, slots=True)
class UtcDatetime:
    """An aware datetime. Every transaction and error is stamped with one."""

    value: datetime

    def __post_init__(self) -> None:
        if self.value.utcoffset() is None:
            raise TypeError(f"naive datetime rejected: {self.value.isoformat()}")

    @staticmethod
    def parse(raw: datetime) -> Ok[UtcDatetime] | Err[str]:
        """Normalise an aware datetime to UTC; naive input is an Err."""
        if raw.utcoffset() is None:
            return Err(f"naive datetime rejected: {raw.isoformat()}")
        return Ok(UtcDatetime(value=raw.astimezone(UTC)))

    @staticmethod
    def now() -> UtcDatetime:
        return UtcDatetime(value=datetime.now(tz=UTC))

    def isoformat(self) -> str:
        return self.value.isoformat()


@final
@dataclass(frozen=True, slots=True)
class FrozenMap[K, V]:
    """Read-only mapping held as key-sorted pairs, so equal maps hash equal.

    Opening balances live in one of these so a LedgerConfig stays hashable.
    """

    _entries: tuple[tuple[K, V], ...]

    EMPTY: ClassVar[FrozenMap[Any, Any]]

    @staticmethod
    def create(items: dict[K, V] | Iterable[tuple[K, V]]) -> Ok[FrozenMap[K, V]] | Err[str]:
        """Later pairs override earlier ones with the same key."""
        pairs = dict(items)
        try:
            ordered = sorted(pairs.items(), key=itemgetter(0))
        except TypeError as e:
            return Err(f"FrozenMap keys must be mutually comparable: {e}")
        return Ok(FrozenMap(_entries=tuple(ordered)))

    def _position(self, key: object) -> int | None:
        for i, (k, _) in enumerate(self._entries):
            if k == key:
                return i
        return None

    def get(self, key: K, default: V | None = None) -> V | None:
        i = self._position(key)
        return default if i is None else self._entries[i][1]

    def __getitem__(self, key: K) -> V:
        i = self._position(key)
        if i is None:
            raise KeyError(key)
        return self._entries[i][1]

    def __contains__(self, key: object) -> bool:
        return self._position(key) is not None

    def __iter__(self) -> Iterator[K]:
        return map(itemgetter(0), self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def items(self) -> tuple[tuple[K, V], ...]:
        return self._entries

    def to_dict(self) -> dict[K, V]:
        return dict(self._entries)


FrozenMap.EMPTY = FrozenMap(_entries=())
