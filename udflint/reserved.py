"""Names bound by the Aerospike UDF sandbox's built-in namespace objects."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Iterator

#: Shipped list; ``list`` appears twice.
AEROSPIKE_NAMES = (
    "record",
    "map",
    "list",
    "aerospike",
    "bytes",
    "geojson",
    "iterator",
    "list",
    "stream",
)


class ReservedNames:
    """Immutable, case-sensitive set of names user code may not declare."""

    __slots__ = ("_names",)

    def __init__(self, names: Iterable[str] = AEROSPIKE_NAMES) -> None:
        self._names: FrozenSet[str] = frozenset(names)

    def is_reserved(self, name: str) -> bool:
        return name in self._names

    def extended(self, names: Iterable[str]) -> "ReservedNames":
        """Return a new registry with *names* added."""
        return ReservedNames(self._names.union(names))

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"ReservedNames({sorted(self._names)!r})"


DEFAULT_RESERVED = ReservedNames()


def is_reserved(name: str) -> bool:
    """Exact match against the shipped registry."""
    return DEFAULT_RESERVED.is_reserved(name)
