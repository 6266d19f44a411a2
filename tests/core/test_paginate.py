import pytest
from unittest.mock import MagicMock
from leftovers.core.errors import TransportError
from leftovers.core.paginate import collect, PAGE_DELAY


def test_collect_joins_pages(no_sleep):
    pages = {
        None: (['a', 'b'], 'p2'),
        'p2': (['c', 'd'], 'p3'),
        'p3': (['e'], None),
    }
    fetch = MagicMock(side_effect=lambda token: pages[token])

    items = collect(fetch, 'images')

    assert items == ['a', 'b', 'c', 'd', 'e']
    assert fetch.call_count == 3
    # One delay between each pair of pages, none before the first or after the last.
    assert no_sleep == [PAGE_DELAY, PAGE_DELAY]


def test_collect_single_page_does_not_sleep(no_sleep):
    fetch = MagicMock(return_value=(['a'], ''))

    assert collect(fetch, 'images') == ['a']
    assert no_sleep == []


def test_collect_empty_page():
    fetch = MagicMock(return_value=(None, None))

    assert collect(fetch, 'images') == []


def test_collect_failure_global_scope():
    fetch = MagicMock(side_effect=Exception('some error'))

    with pytest.raises(TransportError) as excinfo:
        collect(fetch, 'images')

    assert str(excinfo.value) == 'Listing images: some error'


def test_collect_failure_on_later_page_returns_nothing():
    fetch = MagicMock(side_effect=[(['a'], 'next'), Exception('some error')])

    with pytest.raises(TransportError) as excinfo:
        collect(fetch, 'instance groups', 'zone zone-1')

    assert str(excinfo.value) == 'Listing instance groups for zone zone-1: some error'
    assert excinfo.value.scope == 'zone zone-1'
