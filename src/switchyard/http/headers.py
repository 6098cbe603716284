"""Immutable, case-insensitive HTTP headers.

Built once from the raw ASGI byte pairs and indexed by lowercase name,
so lookups during dispatch never re-decode.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive request headers.

    ``headers["Accept"]`` returns the first value; ``get_list`` returns
    every value in arrival order.
    """

    __slots__ = ("_index", "_raw")

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        pairs = tuple(raw)
        index: dict[str, list[str]] = {}
        for name, value in pairs:
            index.setdefault(name.decode("latin-1").lower(), []).append(
                value.decode("latin-1")
            )
        self._raw = pairs
        self._index = index

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str] | None) -> Headers:
        """Build headers from a plain ``{name: value}`` mapping."""
        if not headers:
            return cls()
        return cls(
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in headers.items()
        )

    def __getitem__(self, key: str) -> str:
        return self._index[key.lower()][0]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._index.get(key.lower())
        return values[0] if values else default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._index.get(key.lower(), ()))

    @property
    def raw(self) -> tuple[tuple[bytes, bytes], ...]:
        """The original ASGI byte pairs."""
        return self._raw
