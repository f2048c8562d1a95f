"""Value coercion and comparison rules shared by the catalog operations.

Values are compared the loose way classic array functions compare them:
numeric strings compare as numbers, booleans and ``None`` compare by
truthiness, other scalars compare as strings. Containers cannot be turned
into strings; doing so emits an ``Array to string conversion`` warning.
"""

import re
import warnings
from functools import cmp_to_key
from typing import Any, Callable, Iterable, Mapping, TypeAlias

from arraylegacy.catalog.constants import (
    SORT_FLAG_CASE,
    SORT_NATURAL,
    SORT_NUMERIC,
    SORT_REGULAR,
    SORT_STRING,
)

Key: TypeAlias = int | str

MISSING: Any = object()

_NUMERIC = re.compile(r'\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*')
_INTEGER = re.compile(r'\s*[+-]?\d+\s*')
_INTEGER_KEY = re.compile(r'-?[1-9]\d*|0')
_DIGITS = re.compile(r'(\d+)')


def is_array(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def type_label(value: Any) -> str:
    return 'array' if is_array(value) else type(value).__name__


def as_dict(value: Any, position: int = 1) -> dict[Key, Any]:
    """Copy an array-like argument into a plain dict.

    Sequences become ``{0: first, 1: second, ...}``.
    """
    if isinstance(value, Mapping):
        return dict(value.items())
    if isinstance(value, (list, tuple)):
        return dict(enumerate(value))
    raise TypeError(f'Argument #{position} must be of type array, {type_label(value)} given')


def normalize_key(key: Any) -> Key:
    """Coerce a value into a key: decimal strings become ints, ``None`` becomes ``''``."""
    if isinstance(key, bool):
        return int(key)
    if isinstance(key, int):
        return key
    if isinstance(key, float):
        return int(key)
    if key is None:
        return ''
    if isinstance(key, str):
        return int(key) if _INTEGER_KEY.fullmatch(key) else key
    raise TypeError(f'Illegal offset type {type_label(key)}')


def next_index(array: Mapping[Key, Any]) -> int:
    indexes = [key for key in array if isinstance(key, int)]
    return max(indexes) + 1 if indexes else 0


def renumber(items: Iterable[tuple[Key, Any]]) -> dict[Key, Any]:
    """Rebuild a dict keeping string keys and renumbering integer keys from 0."""
    result: dict[Key, Any] = {}
    index = 0
    for key, value in items:
        if isinstance(key, int):
            result[index] = value
            index += 1
        else:
            result[key] = value
    return result


def numeric(value: str) -> int | float | None:
    """Parse a numeric string, or return ``None`` when it is not one."""
    if _INTEGER.fullmatch(value):
        return int(value)
    if _NUMERIC.fullmatch(value):
        return float(value)
    return None


def as_number(value: Any) -> int | float | None:
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return numeric(value)
    return None


def to_number(value: Any, operation: str) -> int | float | None:
    """Coerce an operand for arithmetic; ``None`` means the value is skipped."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is None:
        return 0
    if isinstance(value, str):
        number = numeric(value)
        if number is None:
            warnings.warn('A non-numeric value encountered', RuntimeWarning, stacklevel=2)
            return 0
        return number

    warnings.warn(f'{operation} is not supported on type {type_label(value)}', RuntimeWarning, stacklevel=2)
    return None


def to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return '1' if value else ''
    if value is None:
        return ''
    if isinstance(value, float):
        if value != value:
            return 'NAN'
        if value in (float('inf'), float('-inf')):
            return 'INF' if value > 0 else '-INF'
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if is_array(value):
        warnings.warn('Array to string conversion', RuntimeWarning, stacklevel=2)
        return 'Array'
    return str(value)


def truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value not in ('', '0')
    return bool(value)


def _sign(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def compare(left: Any, right: Any) -> int:
    """Three-way loose comparison.

    Raises ``TypeError`` when the two values have no meaningful order,
    e.g. two mappings.
    """
    if left is None and isinstance(right, str):
        return _sign('', right)
    if right is None and isinstance(left, str):
        return _sign(left, '')
    if isinstance(left, bool) or isinstance(right, bool) or left is None or right is None:
        return _sign(truthy(left), truthy(right))

    left_number, right_number = as_number(left), as_number(right)
    if left_number is not None and right_number is not None:
        return _sign(left_number, right_number)

    if isinstance(left, (str, int, float)) and isinstance(right, (str, int, float)):
        return _sign(to_string(left), to_string(right))

    return _sign(left, right)


def loose_equals(left: Any, right: Any) -> bool:
    try:
        return compare(left, right) == 0
    except TypeError:
        return left == right


def strict_equals(left: Any, right: Any) -> bool:
    return type(left) is type(right) and left == right


def equality(strict: bool) -> Callable[[Any, Any], bool]:
    return strict_equals if strict else loose_equals


def natural_key(value: str) -> list[int | str]:
    # Even positions hold text, odd positions hold digit runs.
    return [int(part) if index % 2 else part for index, part in enumerate(_DIGITS.split(value))]


def _numeric_key(value: Any) -> int | float:
    if isinstance(value, bool):
        return int(value)
    number = as_number(value)
    return 0 if number is None else number


def sort_key(flags: int = SORT_REGULAR) -> Callable[[Any], Any]:
    """Return a sort key for one of the ``SORT_*`` flags."""
    fold = bool(flags & SORT_FLAG_CASE)
    base = flags & ~SORT_FLAG_CASE

    if base == SORT_REGULAR:
        return cmp_to_key(compare)
    if base == SORT_NUMERIC:
        return _numeric_key
    if base == SORT_STRING:
        if fold:
            return lambda value: to_string(value).lower()
        return to_string
    if base == SORT_NATURAL:
        if fold:
            return lambda value: natural_key(to_string(value).lower())
        return lambda value: natural_key(to_string(value))

    raise ValueError(f'Unknown sort flag {flags}')


def comparator(callback: Callable[[Any, Any], Any]) -> Callable[[Any, Any], int]:
    """Adapt a user comparison callback to a strict -1/0/1 comparator."""

    def _compare(left: Any, right: Any) -> int:
        return _sign(callback(left, right), 0)

    return _compare


def split_callback(arguments: tuple[Any, ...]) -> tuple[list[dict[Key, Any]], Callable[..., Any]]:
    """Split ``(*arrays, callback)`` as taken by the ``u*`` diff/intersect family."""
    if not arguments or not callable(arguments[-1]):
        raise TypeError('The last argument must be a valid callback')

    *arrays, callback = arguments
    return [as_dict(array, position) for position, array in enumerate(arrays, start=2)], callback
