import re

_ACCESSOR = re.compile(r'(get|set)(\w+)')


def to_camel_case(name: str) -> str:
    """``full_name`` -> ``FullName``. Empty segments are dropped."""
    return ''.join(part[:1].upper() + part[1:] for part in name.split('_'))


def to_snake_case(name: str) -> str:
    """``FullName`` -> ``full_name``. Every uppercase letter starts a new word."""
    return ''.join(f'_{char}' if char.isupper() else char for char in name).lower().strip('_')


def parse_accessor(method: str) -> tuple[str, str] | None:
    """Split ``getFooBar`` into ``('get', 'foo_bar')``.

    Returns ``None`` unless the name is ``get`` or ``set`` followed by a word
    starting with an uppercase letter.
    """
    match = _ACCESSOR.fullmatch(method)
    if match is None:
        return None

    verb, rest = match.groups()
    if not rest[0].isupper():
        return None

    return verb, to_snake_case(rest)
