from collections.abc import Iterator, Mapping, MutableMapping
from copy import deepcopy
from logging import getLogger
from typing import Any, Callable, ClassVar, Self

from arraylegacy.catalog.values import Key, as_dict
from arraylegacy.dispatch import Accessor, CallSite, invoke, resolve
from arraylegacy.errors import ConfigurationError
from arraylegacy.naming import to_camel_case
from arraylegacy.serializer import dumps, flatten, loads

logger = getLogger(__name__)

_MISSING: Any = object()


class ArrayLegacy(MutableMapping[Key, Any]):
    """
    Mapping of named attributes with convention-based accessors.

    An entity wraps a single ordered dict (its store). Values can be read
    and written by key, through ``get``/``set``, or through dynamic
    accessor methods: ``entity.getFullName()`` reads ``full_name`` and
    ``entity.setFullName(value)`` writes it. Any other undeclared method is
    looked up in the operation catalog and run against the store, e.g.
    ``entity.asort()`` or ``entity.call('values')``.

    Parameters
    ----------
    attributes : Mapping | Sequence | None, optional
        Initial contents. A sequence is stored under the keys ``0..n-1``.
        When omitted, a deep copy of ``default_attributes`` is used.

    Attributes
    ----------
    default_attributes : Mapping, class attribute
        Contents of an entity constructed without arguments.
    _attributes : dict
        The store. Subclasses read and write it directly from accessor
        overrides, since going through ``self[...]`` would call the
        override again.

    Notes
    -----
    - A subclass customises one attribute by defining ``get<CamelName>``
      and/or ``set<CamelName>``, e.g. ``getFullName(self)`` and
      ``setFullName(self, value)`` for ``full_name``.
    - Reading a missing key by index returns ``None`` instead of raising.
    - Cyclic nesting is unsupported; ``to_array`` on a cycle exhausts the
      recursion limit.

    Examples
    --------
    >>> entity = ArrayLegacy({'foo_bar': 5})
    >>> entity.getFooBar()
    5
    >>> entity.setFooBar(7)
    7
    >>> entity['foo_bar']
    7
    """

    default_attributes: ClassVar[Mapping[Key, Any] | None] = {}

    _attributes: dict[Key, Any]

    def __init__(self, attributes: Mapping[Key, Any] | list[Any] | tuple[Any, ...] | None = None) -> None:
        if attributes is None:
            defaults = type(self).default_attributes
            store = dict(deepcopy(defaults)) if isinstance(defaults, Mapping) else defaults
        else:
            store = as_dict(attributes)
        self._attributes = store  # pyright: ignore[reportAttributeAccessIssue]

    @classmethod
    def make(cls, attributes: Mapping[Key, Any] | list[Any] | tuple[Any, ...]) -> Self:
        return cls(attributes)

    @classmethod
    def from_bytes(cls, payload: bytes) -> Self:
        return cls(loads(payload))

    # Index access

    def _require_store(self) -> dict[Key, Any]:
        # __dict__ lookup keeps a missing store away from __getattr__.
        store = self.__dict__.get('_attributes')
        if not isinstance(store, dict):
            raise ConfigurationError(
                f'Property attributes must be defined as a mapping in the {type(self).__name__} class'
            )
        return store

    def exists(self, key: Key) -> bool:
        return key in self._require_store()

    def get(self, name: Key, default: Any = None) -> Any:
        result = self.get_attribute(name)
        if result is None and not self.exists(name):
            return default
        return result

    def set(self, name: Key, value: Any) -> Any:
        return self.set_attribute(name, value)

    def remove(self, key: Key) -> None:
        if not self.exists(key):
            return
        self.unset_attribute(key)

    def __getitem__(self, key: Key) -> Any:
        if not self.exists(key) and self._accessor('get', key) is None:
            return None
        return self.get_attribute(key)

    def __setitem__(self, key: Key, value: Any) -> None:
        self.set_attribute(key, value)

    def __delitem__(self, key: Key) -> None:
        self.remove(key)

    def __contains__(self, key: object) -> bool:
        return self.exists(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[Key]:
        return iter(self._require_store())

    def __len__(self) -> int:
        return len(self._require_store())

    def pop(self, key: Key, default: Any = _MISSING) -> Any:
        if not self.exists(key):
            if default is _MISSING:
                raise KeyError(key)
            return default

        value = self.get_attribute(key)
        self.remove(key)
        return value

    def setdefault(self, key: Key, default: Any = None) -> Any:
        if not self.exists(key):
            self.set_attribute(key, default)
        return self.get_attribute(key)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.__dict__.get("_attributes")!r})'

    def __copy__(self) -> Self:
        return type(self)(dict(self._require_store()))

    # Attribute resolution

    def _accessor(self, verb: str, name: Any) -> Callable[..., Any] | None:
        """Return the bound ``get<CamelName>``/``set<CamelName>`` override, if the class defines one."""
        if not isinstance(name, str):
            return None

        camel = to_camel_case(name)
        if not camel:
            return None

        # Class lookup only; instance lookup would reach __getattr__ and
        # hand back the dynamic accessor.
        method = f'{verb}{camel}'
        if not callable(getattr(type(self), method, None)):
            return None
        return getattr(self, method)

    def get_attribute(self, name: Key) -> Any:
        result = None
        if self.exists(name):
            result = self._attributes[name]

        getter = self._accessor('get', name)
        if getter is not None:
            result = getter()

        return result

    def set_attribute(self, name: Key, value: Any) -> Any:
        setter = self._accessor('set', name)
        if setter is not None:
            return setter(value)

        self._require_store()[name] = value
        return value

    def unset_attribute(self, name: Key) -> None:
        del self._require_store()[name]

    # Dynamic dispatch

    def call(self, method: str, *args: Any) -> Any:
        """Dispatch ``method`` by name, e.g. ``entity.call('in', 3)``.

        Needed for names that collide with mapping methods (``values``,
        ``keys``, ``pop``) or are not valid identifiers (``in``).
        """
        return self._dispatch(method, args, CallSite.capture())

    def __getattr__(self, name: str) -> Callable[..., Any]:
        resolve(name)

        def dispatched(*args: Any) -> Any:
            return self._dispatch(name, args, CallSite.capture())

        dispatched.__name__ = name
        return dispatched

    def _dispatch(self, method: str, args: tuple[Any, ...], site: CallSite) -> Any:
        route = resolve(method)
        logger.debug('Dispatching %s on %s to %s', method, type(self).__name__, route)

        if isinstance(route, Accessor):
            if route.verb == 'get':
                return self.get_attribute(route.attribute)
            return self.set_attribute(route.attribute, *args)

        result = invoke(route, self._require_store(), args, site)
        if isinstance(result.value, (dict, list, tuple)):
            return self.make(result.value)
        return result.value

    # Serialization

    def to_array(self) -> dict[Key, Any]:
        """Return the store as plain nested dicts and lists, without entities."""
        return {key: flatten(value) for key, value in self._require_store().items()}

    def serialize(self) -> bytes:
        return dumps(self._require_store())

    def unserialize(self, payload: bytes) -> None:
        self._attributes = loads(payload)
