"""Typed views over a single claim: missing, JSON null, or present.

The three variants keep "the sender never sent it" apart from "the sender
sent an explicit null":

- ``MissingClaim``: every accessor raises ``MissingClaimError``.
- ``NullClaim``: scalar accessors return None, collection accessors return
  an empty collection.
- ``JsonClaim``: accessors coerce according to the JSON type of the node and
  return None when the node has a different type.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from jwtkit.core.errors import DecodeError, MissingClaimError

T = TypeVar("T")

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Claim(ABC):
    """Common contract of the three claim variants."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def is_missing(self) -> bool:
        """True when the name does not appear in the token."""
        return False

    def is_null(self) -> bool:
        """True when the claim is present with a JSON null value."""
        return False

    @abstractmethod
    def as_boolean(self) -> bool | None:
        """The value if it is a JSON boolean."""

    @abstractmethod
    def as_int(self) -> int | None:
        """The value as a signed 32-bit integer, truncating decimals."""

    @abstractmethod
    def as_long(self) -> int | None:
        """The value as a signed 64-bit integer, truncating decimals."""

    @abstractmethod
    def as_double(self) -> float | None:
        """The value if it is a finite JSON number."""

    @abstractmethod
    def as_string(self) -> str | None:
        """The value if it is a JSON string."""

    @abstractmethod
    def as_date(self) -> datetime | None:
        """The value read as whole seconds since the epoch, in UTC."""

    @abstractmethod
    def as_array(self, decode: type[T] | Callable[[Any], T]) -> tuple[T, ...] | None:
        """A JSON array with every element converted by ``decode``."""

    @abstractmethod
    def as_list(self, decode: type[T] | Callable[[Any], T]) -> list[T] | None:
        """Same as ``as_array`` but returns a list."""

    @abstractmethod
    def as_map(self) -> dict[str, Any] | None:
        """The value if it is a JSON object."""

    @abstractmethod
    def as_type(self, tp: type[T]) -> T | None:
        """The value validated into ``tp`` with pydantic."""


class MissingClaim(Claim):
    """A claim name that does not appear in the token at all."""

    __slots__ = ()

    def is_missing(self) -> bool:
        return True

    def _fail(self) -> MissingClaimError:
        return MissingClaimError(self._name)

    def as_boolean(self) -> bool | None:
        raise self._fail()

    def as_int(self) -> int | None:
        raise self._fail()

    def as_long(self) -> int | None:
        raise self._fail()

    def as_double(self) -> float | None:
        raise self._fail()

    def as_string(self) -> str | None:
        raise self._fail()

    def as_date(self) -> datetime | None:
        raise self._fail()

    def as_array(self, decode: type[T] | Callable[[Any], T]) -> tuple[T, ...] | None:
        raise self._fail()

    def as_list(self, decode: type[T] | Callable[[Any], T]) -> list[T] | None:
        raise self._fail()

    def as_map(self) -> dict[str, Any] | None:
        raise self._fail()

    def as_type(self, tp: type[T]) -> T | None:
        raise self._fail()

    def __repr__(self) -> str:
        return f"MissingClaim({self._name!r})"

    def __str__(self) -> str:
        return "Missing Claim"


class NullClaim(Claim):
    """A claim explicitly set to JSON null."""

    __slots__ = ()

    def is_null(self) -> bool:
        return True

    def as_boolean(self) -> bool | None:
        return None

    def as_int(self) -> int | None:
        return None

    def as_long(self) -> int | None:
        return None

    def as_double(self) -> float | None:
        return None

    def as_string(self) -> str | None:
        return None

    def as_date(self) -> datetime | None:
        return None

    def as_array(self, decode: type[T] | Callable[[Any], T]) -> tuple[T, ...] | None:
        return ()

    def as_list(self, decode: type[T] | Callable[[Any], T]) -> list[T] | None:
        return []

    def as_map(self) -> dict[str, Any] | None:
        return {}

    def as_type(self, tp: type[T]) -> T | None:
        return None

    def __repr__(self) -> str:
        return f"NullClaim({self._name!r})"

    def __str__(self) -> str:
        return "Null Claim"


def _type_name(decode: Any) -> str:
    return getattr(decode, "__name__", repr(decode))


def _converter(decode: type[T] | Callable[[Any], T]) -> Callable[[Any], T]:
    if isinstance(decode, type):
        adapter = TypeAdapter(decode)
        return lambda item: adapter.validate_python(item, strict=True)
    return decode


class JsonClaim(Claim):
    """A claim carrying a non-null JSON value."""

    __slots__ = ("_node",)

    def __init__(self, name: str, node: Any) -> None:
        super().__init__(name)
        self._node = node

    @property
    def node(self) -> Any:
        """The parsed JSON value as returned by ``json.loads``."""
        return self._node

    def _number(self) -> int | float | None:
        # bool is an int subclass but never a JSON number
        if isinstance(self._node, bool) or not isinstance(self._node, int | float):
            return None
        if isinstance(self._node, float) and not math.isfinite(self._node):
            return None
        return self._node

    def _integer(self, low: int, high: int) -> int | None:
        number = self._number()
        if number is None:
            return None
        value = int(number)
        return value if low <= value <= high else None

    def as_boolean(self) -> bool | None:
        return self._node if isinstance(self._node, bool) else None

    def as_int(self) -> int | None:
        return self._integer(INT32_MIN, INT32_MAX)

    def as_long(self) -> int | None:
        return self._integer(INT64_MIN, INT64_MAX)

    def as_double(self) -> float | None:
        number = self._number()
        return None if number is None else float(number)

    def as_string(self) -> str | None:
        return self._node if isinstance(self._node, str) else None

    def as_date(self) -> datetime | None:
        seconds = self.as_long()
        if seconds is None:
            return None
        try:
            return datetime.fromtimestamp(seconds, UTC)
        except (OverflowError, OSError, ValueError):
            return None

    def _decode_items(self, decode: type[T] | Callable[[Any], T]) -> list[T]:
        convert = _converter(decode)
        items: list[T] = []
        for item in self._node:
            try:
                items.append(convert(item))
            except (ValueError, TypeError) as exc:
                raise DecodeError(
                    f"Couldn't map the Claim's array contents to {_type_name(decode)}"
                ) from exc
        return items

    def as_array(self, decode: type[T] | Callable[[Any], T]) -> tuple[T, ...] | None:
        if not isinstance(self._node, list):
            return None
        return tuple(self._decode_items(decode))

    def as_list(self, decode: type[T] | Callable[[Any], T]) -> list[T] | None:
        if not isinstance(self._node, list):
            return None
        return self._decode_items(decode)

    def as_map(self) -> dict[str, Any] | None:
        return dict(self._node) if isinstance(self._node, dict) else None

    def as_type(self, tp: type[T]) -> T | None:
        try:
            return TypeAdapter(tp).validate_python(self._node)
        except ValidationError as exc:
            raise DecodeError(
                f"Couldn't map the Claim value to {_type_name(tp)}"
            ) from exc

    def __repr__(self) -> str:
        return f"JsonClaim({self._name!r}, {self._node!r})"

    def __str__(self) -> str:
        return repr(self._node)


ClaimValue = MissingClaim | NullClaim | JsonClaim


def claim_from_tree(tree: Mapping[str, Any], name: str) -> ClaimValue:
    """Resolve one claim of a parsed header or payload."""
    if name not in tree:
        return MissingClaim(name)
    node = tree[name]
    if node is None:
        return NullClaim(name)
    return JsonClaim(name, node)
