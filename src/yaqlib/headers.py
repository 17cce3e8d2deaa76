"""Header collection: normalization of header-like input and case-insensitive lookup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Any, ClassVar, NamedTuple, Optional, TypedDict, Union

HEADERS_TYPE_ERROR = "Headers must be a mapping or an iterable of entries"


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset.UNSET
"""Marker for a header value that was never given. Entries carrying it are dropped."""


class HeaderOptions(TypedDict, total=False):
    """Per-entry header options."""

    # When False (the default), the header replaces any earlier value with the
    # same name. When True, it is added alongside them.
    append: bool


class HeaderEntry(NamedTuple):
    """A single normalized header: name, value and options."""

    name: str
    value: Optional[str]
    options: Optional[HeaderOptions] = None

    @property
    def append(self) -> bool:
        return bool(self.options and self.options.get("append"))


HeaderInput = Union[Mapping[Any, Any], Iterable[Any]]


def _is_value_pair(value: Union[list, tuple]) -> bool:
    """A ``(value, options)`` pair, as opposed to a list of several values."""
    if len(value) == 1:
        return True
    return len(value) == 2 and (value[1] is None or isinstance(value[1], Mapping))


def _matches(name: str, key: str, match_case: bool) -> bool:
    if match_case:
        return name == key
    return name.lower() == key.lower()


class HeaderCollection:
    """
    Immutable, ordered collection of HTTP-like headers.

    Entries are kept in insertion order and are never removed. Single-value
    lookups return the *last* matching entry, so later headers win, while
    multi-value lookups return every match.

    Example:
        headers = HeaderCollection(
            {"Content-Type": "application/json"},
            [("Accept", "text/html"), ("Accept", "application/json", {"append": True})],
        )
        headers.get("accept")      # "application/json"
        headers.get_all("accept")  # ["text/html", "application/json"]
    """

    empty: ClassVar[HeaderCollection]

    __slots__ = ("_headers",)

    @classmethod
    def normalize(cls, headers: Optional[HeaderInput]) -> Iterator[HeaderEntry]:
        """
        Normalize header input into a flat sequence of ``HeaderEntry`` tuples.

        Accepts:
        - A mapping of header name to a value, a ``(value, options)`` pair or
          a list of values
        - An iterable of either:
          - A mapping like above
          - A ``(name, value, options?)`` or ``(name, (value, options?))`` tuple

        Names and values that are not strings are coerced with ``str()``.
        Entries whose value is ``UNSET`` are dropped; ``None`` values are kept.

        Args:
            headers: The headers to normalize

        Yields:
            Normalized header entries, in input order

        Raises:
            TypeError: If the input (or one of its items) has an unsupported shape
            ValueError: If a header name is empty
        """
        if not headers:
            return
        if isinstance(headers, Mapping):
            yield from cls.normalize(headers.items())
            return
        if isinstance(headers, (str, bytes, bytearray)) or not isinstance(headers, Iterable):
            raise TypeError(HEADERS_TYPE_ERROR)

        for item in headers:
            if isinstance(item, Mapping):
                yield from cls.normalize(item.items())
            elif isinstance(item, (tuple, list)):
                yield from cls._normalize_entry(item)
            else:
                raise TypeError(HEADERS_TYPE_ERROR)

    @staticmethod
    def _normalize_entry(item: Union[list, tuple]) -> Iterator[HeaderEntry]:
        key = item[0] if len(item) > 0 else UNSET
        value = item[1] if len(item) > 1 else UNSET
        options = item[2] if len(item) > 2 else None

        if isinstance(value, (list, tuple)):
            if _is_value_pair(value):
                options = value[1] if len(value) > 1 else None
                values = [value[0]]
            else:
                values = list(value)
        else:
            values = [value]

        for entry_value in values:
            if entry_value is UNSET:
                continue

            name = key if isinstance(key, str) else str(key)
            if not name:
                raise ValueError("Header name must not be empty")
            if entry_value is not None and not isinstance(entry_value, str):
                entry_value = str(entry_value)

            yield HeaderEntry(name, entry_value, dict(options) if options is not None else None)

    def __init__(self, *inputs: Optional[HeaderInput]) -> None:
        self._headers: tuple[HeaderEntry, ...] = tuple(
            entry for headers in inputs for entry in self.normalize(headers)
        )

    @classmethod
    def _from_entries(cls, entries: tuple[HeaderEntry, ...]) -> HeaderCollection:
        collection = cls.__new__(cls)
        collection._headers = entries
        return collection

    @property
    def headers(self) -> tuple[HeaderEntry, ...]:
        """The underlying entries."""
        return self._headers

    @property
    def content_type(self) -> Optional[str]:
        """Alias for getting the ``Content-Type`` header."""
        return self.get("Content-Type")

    @property
    def authorization(self) -> Optional[str]:
        """Alias for getting the ``Authorization`` header."""
        return self.get("Authorization")

    def extend(self, *inputs: Optional[HeaderInput]) -> HeaderCollection:
        """
        Create a new collection with additional headers appended.

        Args:
            *inputs: Header inputs, normalized and appended in order

        Returns:
            A new collection; this one is left untouched
        """
        added = tuple(entry for headers in inputs for entry in self.normalize(headers))
        return self._from_entries(self._headers + added)

    def values_for(self, key: str, match_case: bool = False) -> Iterator[Optional[str]]:
        """Lazily yield all values for the given header name, in insertion order."""
        for name, value, _ in self._headers:
            if _matches(name, key, match_case):
                yield value

    def get_all(self, key: str, match_case: bool = False) -> list[Optional[str]]:
        """
        Get all values for the given header name.

        Args:
            key: The header name
            match_case: Whether to compare names case-sensitively

        Returns:
            Matching values, in insertion order
        """
        return list(self.values_for(key, match_case))

    def get(self, key: str, match_case: bool = False) -> Optional[str]:
        """
        Get the *last* value for the given header name.

        Args:
            key: The header name
            match_case: Whether to compare names case-sensitively

        Returns:
            The value of the last matching entry, or None if there is none
        """
        for name, value, _ in reversed(self._headers):
            if _matches(name, key, match_case):
                return value
        return None

    def to_dict(self) -> dict[str, list[Optional[str]]]:
        """Group values by header name, in order of appearance."""
        grouped: dict[str, list[Optional[str]]] = {}
        for name, value, _ in self._headers:
            grouped.setdefault(name, []).append(value)
        return grouped

    def __len__(self) -> int:
        return len(self._headers)

    def __iter__(self) -> Iterator[HeaderEntry]:
        return iter(self._headers)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return any(_matches(name, key, False) for name, _, _ in self._headers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderCollection):
            return NotImplemented
        return self._headers == other._headers

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"HeaderCollection({list(self._headers)!r})"


HeaderCollection.empty = HeaderCollection()


def group_headers(headers: Iterable[tuple[Any, Any]]) -> dict[str, list[str]]:
    """
    Group ``(name, value)`` pairs by name, in order of appearance.

    For example ``[("a", "1"), ("b", "2"), ("a", 3)]`` becomes
    ``{"a": ["1", "3"], "b": ["2"]}``.

    Args:
        headers: Iterable of name/value pairs; values are coerced to strings

    Returns:
        Dict of header name to its list of values

    Raises:
        TypeError: If headers is a mapping or not iterable
    """
    if isinstance(headers, (Mapping, str, bytes)) or not isinstance(headers, Iterable):
        raise TypeError("Headers must be an iterable of (name, value) pairs")

    grouped: dict[str, list[str]] = {}
    for name, value, *_ in headers:
        grouped.setdefault(str(name), []).append(value if isinstance(value, str) else str(value))
    return grouped
