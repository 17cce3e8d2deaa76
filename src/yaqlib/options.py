"""Immutable request options and their merge ("extend") semantics."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, TypedDict, Union

from .consts import HTTPMethod
from .headers import HeaderCollection, HeaderInput

# Either an exact status code or a function deciding on the status.
StatusPredicate = Union[int, Callable[[int], bool]]


def allow_2xx_statuses(status: int) -> bool:
    """Allow any status code in the 2xx range."""
    return 200 <= status < 300


def allow_4xx_statuses(status: int) -> bool:
    """Allow any status code in the 4xx range."""
    return 400 <= status < 500


def allow_any_status(status: int) -> bool:
    """Allow any status code."""
    return True


def matches_status(predicate: Any, status: int) -> bool:
    """
    Check a single status predicate.

    Integers match by equality and callables by their (truthy) result.
    Anything else, including booleans, never matches.
    """
    if isinstance(predicate, bool):
        return False
    if isinstance(predicate, int):
        return predicate == status
    if callable(predicate):
        return bool(predicate(status))
    return False


class RequestOptionsInput(TypedDict, total=False):
    """Caller-facing request options, all optional."""

    method: Union[HTTPMethod, str]
    headers: HeaderInput
    body: Any
    # Alias for appending a Content-Type header
    content_type: str
    allowed_statuses: Iterable[StatusPredicate]
    only_allowed_statuses: bool


_INPUT_KEYS = frozenset(RequestOptionsInput.__annotations__)


def _method_name(method: Union[HTTPMethod, str]) -> str:
    return method.value if isinstance(method, Enum) else method


def _pick(value: Any, inherited: Any) -> Any:
    return inherited if value is None else value


@dataclass(frozen=True)
class RequestOptions:
    """
    Immutable description of a single request.

    Instances are never modified; ``extend`` derives new ones, so every set
    of options is a snapshot in a tree rooted at ``RequestOptions.default``.

    Attributes:
        method: HTTP method, "GET" by default
        headers: Request headers (any header input is normalized into a
            HeaderCollection on construction)
        body: Optional request body, passed to the transport untouched
        allowed_statuses: Additional status predicates considered successful,
            e.g. 404 when a missing resource is an expected outcome
        only_allowed_statuses: If True, *only* allowed_statuses decide success;
            otherwise any 2xx status is successful as well
        content_type: Init-only alias appending a Content-Type header after
            the explicit headers
    """

    default: ClassVar[RequestOptions]

    method: str = HTTPMethod.GET.value
    headers: HeaderCollection = field(default_factory=lambda: HeaderCollection.empty)
    body: Any = None
    allowed_statuses: tuple[StatusPredicate, ...] = ()
    only_allowed_statuses: Optional[bool] = None
    content_type: InitVar[Optional[str]] = None

    def __post_init__(self, content_type: Optional[str]) -> None:
        headers = self.headers
        if not isinstance(headers, HeaderCollection):
            headers = HeaderCollection(headers)
        if content_type is not None:
            headers = headers.extend({"Content-Type": content_type})

        object.__setattr__(self, "method", _method_name(self.method))
        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "allowed_statuses", tuple(self.allowed_statuses or ()))

    @classmethod
    def from_input(cls, options: Union[RequestOptionsInput, RequestOptions, None]) -> RequestOptions:
        """Build options from caller input, on top of the default baseline."""
        if isinstance(options, RequestOptions):
            return options
        return cls.default.extend(options)

    def to_input(self) -> RequestOptionsInput:
        """Express these options as input for another ``extend`` call."""
        return RequestOptionsInput(
            method=self.method,
            headers=self.headers.headers,
            body=self.body,
            allowed_statuses=self.allowed_statuses,
            only_allowed_statuses=self.only_allowed_statuses,
        )

    def extend(
        self,
        options: Union[RequestOptionsInput, RequestOptions, None] = None,
        **kwargs: Any,
    ) -> RequestOptions:
        """
        Derive new options by merging the given input over these.

        - method, body and only_allowed_statuses are overridden when given
        - allowed_statuses are concatenated, ours first
        - headers are appended after ours, followed by content_type (if given)

        Args:
            options: Options to merge in (a mapping or another RequestOptions)
            **kwargs: Individual options, applied on top of ``options``

        Returns:
            The merged options; this instance is left untouched

        Raises:
            TypeError: If the input is not a mapping or has unknown keys
        """
        if isinstance(options, RequestOptions):
            options = options.to_input()
        elif options is not None and not isinstance(options, Mapping):
            raise TypeError("Request options must be a mapping")

        merged: dict[str, Any] = {**(options or {}), **kwargs}
        unknown = set(merged) - _INPUT_KEYS
        if unknown:
            raise TypeError(f"Unknown request options: {', '.join(sorted(unknown))}")

        return RequestOptions(
            method=_pick(merged.get("method"), self.method),
            headers=self.headers.extend(merged.get("headers")),
            body=_pick(merged.get("body"), self.body),
            allowed_statuses=(*self.allowed_statuses, *(merged.get("allowed_statuses") or ())),
            only_allowed_statuses=_pick(merged.get("only_allowed_statuses"), self.only_allowed_statuses),
            content_type=merged.get("content_type"),
        )

    def status_predicates(self) -> Iterator[StatusPredicate]:
        """Yield the effective predicates: 2xx (unless disabled), then allowed_statuses."""
        if not self.only_allowed_statuses:
            yield allow_2xx_statuses
        yield from self.allowed_statuses

    def is_status_allowed(self, status: int) -> bool:
        """
        Check whether a status code counts as successful for these options.

        Args:
            status: The status code to check

        Returns:
            True if any effective predicate matches
        """
        return any(matches_status(predicate, status) for predicate in self.status_predicates())


RequestOptions.default = RequestOptions()
