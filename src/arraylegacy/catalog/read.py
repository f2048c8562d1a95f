"""Operations which only read the store.

Every handler takes the store as its first argument and returns a new value;
the store itself is a read-only view.
"""

import random
import warnings
from typing import Any, Callable, Mapping, TypeAlias

from arraylegacy.catalog.constants import (
    ARRAY_FILTER_USE_BOTH,
    ARRAY_FILTER_USE_KEY,
    CASE_LOWER,
    CASE_UPPER,
    COUNT_NORMAL,
    COUNT_RECURSIVE,
    SORT_STRING,
)
from arraylegacy.catalog.decorator import operation
from arraylegacy.catalog.values import (
    MISSING,
    Key,
    as_dict,
    equality,
    is_array,
    next_index,
    normalize_key,
    renumber,
    sort_key,
    split_callback,
    to_number,
    to_string,
    truthy,
)

Array: TypeAlias = Mapping[Key, Any]


@operation('array_change_key_case')
def change_key_case(array: Array, case: int = CASE_LOWER) -> dict[Key, Any]:
    result: dict[Key, Any] = {}
    for key, value in array.items():
        if isinstance(key, str):
            key = key.upper() if case == CASE_UPPER else key.lower()
        result[key] = value
    return result


@operation('array_chunk')
def chunk(array: Array, length: int, preserve_keys: bool = False) -> list[dict[Key, Any]]:
    if length < 1:
        raise ValueError('Argument #2 ($length) must be greater than 0')

    chunks: list[dict[Key, Any]] = []
    current: dict[Key, Any] = {}
    for key, value in array.items():
        current[key if preserve_keys else len(current)] = value
        if len(current) == length:
            chunks.append(current)
            current = {}

    if current:
        chunks.append(current)
    return chunks


@operation('array_column')
def column(array: Array, column_key: Key | None, index_key: Key | None = None) -> dict[Key, Any]:
    """Pick one column (or whole rows when ``column_key`` is ``None``) out of a list of rows."""
    result: dict[Key, Any] = {}
    for row in array.values():
        if not is_array(row):
            continue
        row = as_dict(row)

        if column_key is None:
            value = row
        elif column_key in row:
            value = row[column_key]
        else:
            continue

        index = row.get(index_key, MISSING) if index_key is not None else MISSING
        if isinstance(index, (int, str)):
            result[normalize_key(index)] = value
        else:
            result[next_index(result)] = value
    return result


@operation('array_count_values')
def count_values(array: Array) -> dict[Key, int]:
    result: dict[Key, int] = {}
    for value in array.values():
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            key = normalize_key(value)
            result[key] = result.get(key, 0) + 1
        else:
            _warn('Can only count string and integer values, entry skipped')
    return result


# Differences and intersections


def _others(arrays: tuple[Any, ...]) -> list[dict[Key, Any]]:
    return [as_dict(other, position) for position, other in enumerate(arrays, start=2)]


@operation('array_diff')
def diff(array: Array, *arrays: Any) -> dict[Key, Any]:
    excluded = {to_string(value) for other in _others(arrays) for value in other.values()}
    return {key: value for key, value in array.items() if to_string(value) not in excluded}


@operation('array_diff_assoc')
def diff_assoc(array: Array, *arrays: Any) -> dict[Key, Any]:
    others = _others(arrays)
    return {
        key: value
        for key, value in array.items()
        if not any(key in other and to_string(other[key]) == to_string(value) for other in others)
    }


@operation('array_diff_key')
def diff_key(array: Array, *arrays: Any) -> dict[Key, Any]:
    others = _others(arrays)
    return {key: value for key, value in array.items() if not any(key in other for other in others)}


@operation('array_diff_ukey')
def diff_ukey(array: Array, *arguments: Any) -> dict[Key, Any]:
    others, callback = split_callback(arguments)
    return {
        key: value
        for key, value in array.items()
        if not any(callback(key, other_key) == 0 for other in others for other_key in other)
    }


@operation('array_udiff')
def udiff(array: Array, *arguments: Any) -> dict[Key, Any]:
    others, callback = split_callback(arguments)
    return {
        key: value
        for key, value in array.items()
        if not any(callback(value, other_value) == 0 for other in others for other_value in other.values())
    }


@operation('array_intersect')
def intersect(array: Array, *arrays: Any) -> dict[Key, Any]:
    others = [{to_string(value) for value in other.values()} for other in _others(arrays)]
    return {
        key: value
        for key, value in array.items()
        if all(to_string(value) in other for other in others)
    }


@operation('array_intersect_assoc')
def intersect_assoc(array: Array, *arrays: Any) -> dict[Key, Any]:
    others = _others(arrays)
    return {
        key: value
        for key, value in array.items()
        if all(key in other and to_string(other[key]) == to_string(value) for other in others)
    }


@operation('array_intersect_key')
def intersect_key(array: Array, *arrays: Any) -> dict[Key, Any]:
    others = _others(arrays)
    return {key: value for key, value in array.items() if all(key in other for other in others)}


@operation('array_intersect_ukey')
def intersect_ukey(array: Array, *arguments: Any) -> dict[Key, Any]:
    others, callback = split_callback(arguments)
    return {
        key: value
        for key, value in array.items()
        if all(any(callback(key, other_key) == 0 for other_key in other) for other in others)
    }


@operation('array_uintersect')
def uintersect(array: Array, *arguments: Any) -> dict[Key, Any]:
    others, callback = split_callback(arguments)
    return {
        key: value
        for key, value in array.items()
        if all(any(callback(value, other_value) == 0 for other_value in other.values()) for other in others)
    }


# Filtering and lookup


@operation('array_filter')
def filter_values(
    array: Array, callback: Callable[..., Any] | None = None, mode: int = 0
) -> dict[Key, Any]:
    result: dict[Key, Any] = {}
    for key, value in array.items():
        if callback is None:
            keep = value
        elif mode == ARRAY_FILTER_USE_KEY:
            keep = callback(key)
        elif mode == ARRAY_FILTER_USE_BOTH:
            keep = callback(value, key)
        else:
            keep = callback(value)

        if truthy(keep):
            result[key] = value
    return result


@operation('array_flip')
def flip(array: Array) -> dict[Key, Any]:
    result: dict[Key, Any] = {}
    for key, value in array.items():
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            result[normalize_key(value)] = key
        else:
            _warn('Can only flip string and integer values, entry skipped')
    return result


@operation('array_is_list')
def is_list(array: Array) -> bool:
    return list(array) == list(range(len(array)))


@operation('array_key_first')
def key_first(array: Array) -> Key | None:
    return next(iter(array), None)


@operation('array_key_last')
def key_last(array: Array) -> Key | None:
    keys = list(array)
    return keys[-1] if keys else None


@operation('array_keys')
def keys(array: Array, filter_value: Any = MISSING, strict: bool = False) -> list[Key]:
    if filter_value is MISSING:
        return list(array)

    equals = equality(strict)
    return [key for key, value in array.items() if equals(value, filter_value)]


@operation('array_values')
def values(array: Array) -> list[Any]:
    return list(array.values())


@operation('array_find')
def find(array: Array, callback: Callable[[Any, Key], Any]) -> Any:
    for key, value in array.items():
        if truthy(callback(value, key)):
            return value
    return None


@operation('array_find_key')
def find_key(array: Array, callback: Callable[[Any, Key], Any]) -> Key | None:
    for key, value in array.items():
        if truthy(callback(value, key)):
            return key
    return None


@operation('array_any')
def any_match(array: Array, callback: Callable[[Any, Key], Any]) -> bool:
    return any(truthy(callback(value, key)) for key, value in array.items())


@operation('array_all')
def all_match(array: Array, callback: Callable[[Any, Key], Any]) -> bool:
    return all(truthy(callback(value, key)) for key, value in array.items())


@operation('array_rand')
def rand(array: Array, num: int = 1) -> Key | list[Key]:
    if not array:
        raise ValueError('Argument #1 ($array) cannot be empty')
    if not 1 <= num <= len(array):
        raise ValueError('Argument #2 ($num) must be between 1 and the number of elements in argument #1 ($array)')

    keys = list(array)
    if num == 1:
        return random.choice(keys)

    # Picked keys keep their original order.
    return [keys[index] for index in sorted(random.sample(range(len(keys)), num))]


# Combining


@operation('array_merge')
def merge(array: Array, *arrays: Any) -> dict[Key, Any]:
    result: dict[Key, Any] = {}
    index = 0
    for position, current in enumerate((array, *arrays), start=1):
        for key, value in as_dict(current, position).items():
            if isinstance(key, int):
                result[index] = value
                index += 1
            else:
                result[key] = value
    return result


def _merge_recursive_into(target: dict[Key, Any], source: Mapping[Key, Any]) -> None:
    for key, value in source.items():
        if isinstance(key, int):
            target[next_index(target)] = value
        elif key in target:
            existing = target[key]
            merged = as_dict(existing) if is_array(existing) else {0: existing}
            _merge_recursive_into(merged, as_dict(value) if is_array(value) else {0: value})
            target[key] = merged
        else:
            target[key] = value


@operation('array_merge_recursive')
def merge_recursive(array: Array, *arrays: Any) -> dict[Key, Any]:
    result: dict[Key, Any] = {}
    for position, current in enumerate((array, *arrays), start=1):
        _merge_recursive_into(result, as_dict(current, position))
    return result


@operation('array_replace')
def replace(array: Array, *replacements: Any) -> dict[Key, Any]:
    result = dict(array)
    for position, replacement in enumerate(replacements, start=2):
        result.update(as_dict(replacement, position))
    return result


def _replace_recursive(target: dict[Key, Any], source: Mapping[Key, Any]) -> dict[Key, Any]:
    for key, value in source.items():
        if key in target and is_array(target[key]) and is_array(value):
            target[key] = _replace_recursive(as_dict(target[key]), as_dict(value))
        else:
            target[key] = value
    return target


@operation('array_replace_recursive')
def replace_recursive(array: Array, *replacements: Any) -> dict[Key, Any]:
    result = dict(array)
    for position, replacement in enumerate(replacements, start=2):
        result = _replace_recursive(result, as_dict(replacement, position))
    return result


@operation('array_pad')
def pad(array: Array, length: int, value: Any) -> dict[Key, Any]:
    missing = abs(length) - len(array)
    if missing <= 0:
        return dict(array)

    padding = [(0, value)] * missing
    if length > 0:
        return renumber([*array.items(), *padding])
    return renumber([*padding, *array.items()])


# Reordering and slicing


@operation('array_reverse')
def reverse(array: Array, preserve_keys: bool = False) -> dict[Key, Any]:
    items = list(array.items())[::-1]
    return dict(items) if preserve_keys else renumber(items)


@operation('array_slice')
def slice_values(
    array: Array, offset: int, length: int | None = None, preserve_keys: bool = False
) -> dict[Key, Any]:
    items = list(array.items())
    size = len(items)
    start = offset if offset >= 0 else max(size + offset, 0)

    if length is None:
        stop = size
    elif length < 0:
        stop = max(size + length, start)
    else:
        stop = min(start + length, size)

    selected = items[start:stop]
    return dict(selected) if preserve_keys else renumber(selected)


@operation('array_unique')
def unique(array: Array, flags: int = SORT_STRING) -> dict[Key, Any]:
    marker = sort_key(flags)
    seen: list[Any] = []
    result: dict[Key, Any] = {}
    for key, value in array.items():
        current = marker(value)
        if current in seen:
            continue
        seen.append(current)
        result[key] = value
    return result


# Aggregates


@operation('array_sum')
def sum_values(array: Array) -> int | float:
    total: int | float = 0
    for value in array.values():
        number = to_number(value, 'Addition')
        if number is not None:
            total += number
    return total


@operation('array_product')
def product(array: Array) -> int | float:
    total: int | float = 1
    for value in array.values():
        number = to_number(value, 'Multiplication')
        if number is not None:
            total *= number
    return total


@operation('array_reduce')
def reduce_values(array: Array, callback: Callable[[Any, Any], Any], initial: Any = None) -> Any:
    carry = initial
    for value in array.values():
        carry = callback(carry, value)
    return carry


def _count(array: Mapping[Key, Any], recursive: bool) -> int:
    total = 0
    for value in array.values():
        total += 1
        if recursive and is_array(value):
            total += _count(as_dict(value), recursive)
    return total


@operation('count', 'sizeof')
def count(array: Array, mode: int = COUNT_NORMAL) -> int:
    return _count(array, mode == COUNT_RECURSIVE)


# Traversal


@operation('array_walk')
def walk(array: Array, callback: Callable[..., Any], arg: Any = MISSING) -> bool:
    """Call ``callback(value, key[, arg])`` for every entry.

    Values cannot be replaced through the callback; use ``array_map`` for that.
    """
    for key, value in array.items():
        if arg is MISSING:
            callback(value, key)
        else:
            callback(value, key, arg)
    return True


def _walk_recursive(array: Mapping[Key, Any], callback: Callable[..., Any], arg: Any) -> None:
    for key, value in array.items():
        if is_array(value):
            _walk_recursive(as_dict(value), callback, arg)
        elif arg is MISSING:
            callback(value, key)
        else:
            callback(value, key, arg)


@operation('array_walk_recursive')
def walk_recursive(array: Array, callback: Callable[..., Any], arg: Any = MISSING) -> bool:
    _walk_recursive(array, callback, arg)
    return True


def _warn(message: str) -> None:
    warnings.warn(message, RuntimeWarning, stacklevel=3)
