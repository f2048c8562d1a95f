import json
import tomllib
from logging import getLogger
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, cast

import yaml

from arraylegacy.errors import ConfigValidationError

logger = getLogger(__name__)

SECTION = 'arraylegacy'

DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        'warnings_as_errors': True,
        'pickle_protocol': None,
    }
)

_EXPECTED_TYPES: Mapping[str, tuple[type, ...]] = MappingProxyType(
    {
        'warnings_as_errors': (bool,),
        'pickle_protocol': (int, type(None)),
    }
)

_SETTINGS: dict[str, Any] = dict(DEFAULTS)


def bind_settings(**kwargs: Any) -> None:
    """Validate and bind library settings.

    Parameters
    ----------
    warnings_as_errors : bool
        When true, a warning emitted by a catalog operation is raised as
        :class:`~arraylegacy.errors.UnderlyingOperationError`. When false the
        warning is re-emitted at the caller's file and line.
    pickle_protocol : int | None
        Protocol handed to ``cloudpickle`` by ``serialize()``; ``None``
        selects the library default.

    Raises
    ------
    ConfigValidationError
        When a name is unknown or a value has the wrong type. Nothing is
        bound when any value is rejected.
    """
    errors: list[str] = []
    for key, value in kwargs.items():
        expected = _EXPECTED_TYPES.get(key)
        if expected is None:
            errors.append(f'Unknown setting {key}')
            continue

        # bool is an int, but an int is not a protocol flag
        if bool not in expected and isinstance(value, bool):
            errors.append(f'Type mismatch for {key}: got bool')
        elif not isinstance(value, expected):
            names = ', '.join(t.__name__ for t in expected)
            errors.append(f'Type mismatch for {key}: expected {names}, got {type(value).__name__}')

    if errors:
        raise ConfigValidationError('Settings validation failed:\n' + '\n'.join(errors))

    _SETTINGS.update(kwargs)


def get_settings() -> Mapping[str, Any]:
    """Return a read-only view of the bound settings."""
    return MappingProxyType(_SETTINGS)


def resolve_setting(key: str) -> Any:
    if key not in _SETTINGS:
        raise KeyError(f'No setting named {key}')
    return _SETTINGS[key]


def reset_settings() -> None:
    _SETTINGS.clear()
    _SETTINGS.update(DEFAULTS)


def load_settings_file(path: str | PathLike[str] | Path) -> Mapping[str, Any]:
    """Read settings from a YAML, JSON or TOML file and bind them.

    The values may sit at the top level or under an ``arraylegacy`` section.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ConfigValidationError
        If the suffix is unsupported, the content is not a mapping, or a
        value is rejected by :func:`bind_settings`.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f'Settings file not found: {path}')

    text = path.read_text(encoding='utf-8')
    suffix = path.suffix.lower()
    match suffix:
        case '.yaml' | '.yml':
            config = yaml.safe_load(text)
        case '.json':
            config = json.loads(text)
        case '.toml':
            config = tomllib.loads(text)
        case _:
            raise ConfigValidationError(
                f'Unsupported settings file type: {suffix}, supported extensions: .yaml, .yml, .json, .toml'
            )

    if not isinstance(config, Mapping):
        raise ConfigValidationError('Settings file must contain a mapping at the top level')

    config = cast(Mapping[str, Any], config)
    if isinstance(config.get(SECTION), Mapping):
        config = cast(Mapping[str, Any], config[SECTION])

    values = dict(config)
    bind_settings(**values)
    logger.info('Loaded %d setting(s) from %s', len(values), path)
    return values
