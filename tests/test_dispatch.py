import inspect
import logging

import pytest

from arraylegacy import (
    ArrayLegacy,
    OperationKind,
    UndefinedOperationError,
    UnderlyingOperationError,
    bind_settings,
)
from arraylegacy.catalog import Operation, lookup, register, unregister
from arraylegacy.dispatch import Accessor, CallSite, OperationResult, find_operation, invoke, resolve


class Temperature(ArrayLegacy):
    def getCelsius(self) -> float:
        return round((self._attributes['kelvin'] - 273.15), 2)

    def setCelsius(self, value: float) -> float:
        self._attributes['kelvin'] = value + 273.15
        return value


def _line() -> int:
    frame = inspect.currentframe()
    assert frame is not None and frame.f_back is not None
    return frame.f_back.f_lineno


# Accessor routing


def test_dynamic_getter_and_setter():
    entity = ArrayLegacy({'foo_bar': 5})
    assert entity.getFooBar() == 5

    entity.setFooBar(7)
    assert entity.get('foo_bar') == 7


def test_dynamic_getter_for_missing_key_returns_none():
    assert ArrayLegacy().getMissingValue() is None


def test_dynamic_accessors_respect_overrides():
    reading = Temperature({'kelvin': 300.0})
    assert reading.getCelsius() == 26.85
    assert reading.call('getCelsius') == 26.85

    reading.call('setCelsius', 0)
    assert reading['kelvin'] == 273.15


def test_setter_without_value_is_a_type_error():
    with pytest.raises(TypeError):
        ArrayLegacy().setFoo()


def test_resolve_accessor_names():
    assert resolve('getFooBar') == Accessor('get', 'foo_bar')
    assert resolve('setA') == Accessor('set', 'a')


@pytest.mark.parametrize('name', ['getfoo', 'get', 'settle', 'get_foo', 'gets'])
def test_names_that_are_not_accessors(name: str):
    with pytest.raises(UndefinedOperationError):
        resolve(name)


# Catalog routing


def test_sort_by_value_mutates_in_place_and_returns_true():
    entity = ArrayLegacy({'a': 3, 'b': 1, 'c': 2})
    result = entity.asort()
    assert result is True
    assert list(entity.items()) == [('b', 1), ('c', 2), ('a', 3)]


def test_values_returns_wrapped_list_and_leaves_store_alone():
    entity = ArrayLegacy({'a': 1, 'b': 2, 'c': 3})
    result = entity.call('values')
    assert isinstance(result, ArrayLegacy)
    assert result.to_array() == {0: 1, 1: 2, 2: 3}
    assert entity.to_array() == {'a': 1, 'b': 2, 'c': 3}


def test_prefixed_and_unprefixed_names_resolve_to_the_same_operation():
    entity = ArrayLegacy({'a': 1, 'b': 0})
    assert entity.filter().to_array() == entity.array_filter().to_array() == {'a': 1}


def test_results_are_wrapped_with_the_calling_type():
    reading = Temperature({'kelvin': 1.0, 'other': 2.0})
    assert type(reading.reverse()) is Temperature


def test_scalar_results_are_returned_verbatim():
    entity = ArrayLegacy({'a': 1, 'b': 2})
    assert entity.count() == 2
    assert entity.sum() == 3
    assert entity.key_first() == 'a'
    assert entity.is_list() is False


def test_in_alias_and_needle_first_order():
    entity = ArrayLegacy({'a': 1, 'b': '2'})
    assert entity.call('in', 2) is True
    assert entity.call('in', 2, True) is False
    assert entity.search('2') == 'b'
    assert entity.search(9) is False
    assert entity.key_exists('a') is True
    assert entity.map(lambda value: int(value) * 10).to_array() == {'a': 10, 'b': 20}


def test_find_operation_prefers_registered_unprefixed_name():
    assert find_operation('count') is lookup('count')
    assert find_operation('merge') is lookup('array_merge')
    assert find_operation('in') is lookup('in_array')
    assert find_operation('nope') is None


def test_chained_calls_keep_the_interface():
    entity = ArrayLegacy({'a': 3, 'b': 1, 'c': 2, 'd': 0})
    assert entity.filter().array_values().count() == 3


@pytest.mark.parametrize('name', ['range', 'combine', 'fill', 'fill_keys', 'list', 'extract', 'compact'])
def test_unsupported_operations_are_undefined(name: str):
    entity = ArrayLegacy({'a': 1})
    with pytest.raises(UndefinedOperationError):
        entity.call(name, 1, 10)
    with pytest.raises(UndefinedOperationError):
        entity.call(name)
    assert entity.to_array() == {'a': 1}


def test_unknown_names_are_undefined_and_behave_as_attribute_errors():
    entity = ArrayLegacy()
    with pytest.raises(UndefinedOperationError, match='Undefined frobnicate method'):
        entity.frobnicate()
    with pytest.raises(AttributeError):
        entity.call('frobnicate')

    assert not hasattr(entity, 'frobnicate')
    assert hasattr(entity, 'asort')
    assert getattr(entity, '_private', None) is None


def test_private_names_never_dispatch():
    with pytest.raises(UndefinedOperationError):
        resolve('_array_values')


def test_resolve_unsupported_entry_directly():
    entry = lookup('range')
    assert entry is not None
    assert entry.kind is OperationKind.UNSUPPORTED
    with pytest.raises(UndefinedOperationError):
        invoke(entry, {}, (), CallSite('x.py', 1))


# Failures


def test_underlying_error_carries_the_caller_site():
    entity = ArrayLegacy({'a': {'x': 1}, 'b': {'y': 2}})
    with pytest.raises(UnderlyingOperationError) as excinfo:
        line = _line(); entity.sort()  # fmt: skip

    error = excinfo.value
    assert error.operation == 'sort'
    assert error.filename == __file__
    assert error.lineno == line
    assert isinstance(error.__cause__, TypeError)


def test_underlying_error_through_call_carries_the_caller_site():
    entity = ArrayLegacy({'a': 1})
    with pytest.raises(UnderlyingOperationError) as excinfo:
        line = _line(); entity.call('chunk', 0)  # fmt: skip

    assert excinfo.value.lineno == line
    assert 'array_chunk()' in str(excinfo.value)


def test_warnings_are_raised_as_underlying_errors():
    entity = ArrayLegacy({'a': [1], 'b': 'x'})
    with pytest.raises(UnderlyingOperationError, match='Array to string conversion'):
        entity.diff(['x'])


def test_warnings_are_reemitted_at_the_caller_when_not_errors():
    bind_settings(warnings_as_errors=False)
    entity = ArrayLegacy({'a': 1.5, 'b': True})

    with pytest.warns(RuntimeWarning, match='Can only flip') as record:
        line = _line(); flipped = entity.flip()  # fmt: skip

    assert flipped.to_array() == {}
    assert record[0].filename == __file__
    assert record[0].lineno == line


def test_failed_mutation_leaves_the_store_unchanged():
    entity = ArrayLegacy({'a': 2, 'b': 1})

    def broken(left: int, right: int) -> int:
        raise ValueError('no order')

    with pytest.raises(UnderlyingOperationError):
        entity.uasort(broken)
    assert list(entity.items()) == [('a', 2), ('b', 1)]


@pytest.mark.parametrize('error', [RuntimeError('callback failed'), AttributeError('no such thing')])
def test_any_callback_error_is_reported_at_the_caller(error: Exception):
    entity = ArrayLegacy({'a': 1, 'b': 2})

    def broken(value: int) -> bool:
        raise error

    with pytest.raises(UnderlyingOperationError) as excinfo:
        line = _line(); entity.filter(broken)  # fmt: skip

    assert excinfo.value.__cause__ is error
    assert excinfo.value.operation == 'array_filter'
    assert excinfo.value.filename == __file__
    assert excinfo.value.lineno == line


def test_undefined_operation_inside_a_callback_is_not_wrapped():
    entity = ArrayLegacy({'a': 1})
    inner = ArrayLegacy()

    with pytest.raises(UndefinedOperationError, match='Undefined frobnicate method'):
        entity.filter(lambda value: inner.call('frobnicate'))


def test_invoke_reports_mutation():
    store = {'b': 2, 'a': 1}
    entry = lookup('ksort')
    assert entry is not None

    result = invoke(entry, store, (), CallSite('x.py', 1))
    assert result == OperationResult(True, mutated=True)
    assert list(store) == ['a', 'b']

    again = invoke(entry, store, (), CallSite('x.py', 1))
    assert again.mutated is False


def test_read_only_operations_see_a_read_only_view():
    def scribble(array: dict[str, int]) -> None:
        array['x'] = 1

    register(Operation('scribble', OperationKind.READ, scribble))
    try:
        entity = ArrayLegacy({'a': 1})
        with pytest.raises(UnderlyingOperationError):
            entity.scribble()
        assert entity.to_array() == {'a': 1}
    finally:
        unregister('scribble')


def test_dispatch_is_logged(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.DEBUG, logger='arraylegacy'):
        ArrayLegacy({'a': 1}).count()

    assert any('count' in message for message in caplog.messages)
