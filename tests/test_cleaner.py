import pytest
from unittest.mock import MagicMock
from leftovers.cleaner import Leftovers, RunReport
from leftovers.core.errors import TransportError
from leftovers.core.models import DeletionOutcome, OutcomeResult


def _kind(plural, prerequisites=(), candidates=None, outcomes=None, calls=None):
    calls = calls if calls is not None else []
    kind = MagicMock()
    kind.plural = plural
    kind.prerequisites = list(prerequisites)

    def list_(filter):
        calls.append(('list', plural))
        return dict(candidates or {})

    def delete(found):
        calls.append(('delete', plural))
        return list(outcomes or [])

    kind.list.side_effect = list_
    kind.delete.side_effect = delete
    return kind


def test_runs_kinds_in_declared_order(logger):
    calls = []
    kinds = [
        _kind('role policies', calls=calls),
        _kind('roles', ['role policies'], calls=calls),
        _kind('users', calls=calls),
    ]

    Leftovers(kinds, logger).delete('banana')

    assert calls == [
        ('list', 'role policies'), ('delete', 'role policies'),
        ('list', 'roles'), ('delete', 'roles'),
        ('list', 'users'), ('delete', 'users'),
    ]


def test_prerequisites_move_dependents_first(logger):
    kinds = [_kind('networks', ['subnetworks']), _kind('subnetworks')]

    leftovers = Leftovers(kinds, logger)

    assert [k.plural for k in leftovers.kinds] == ['subnetworks', 'networks']


def test_filter_is_passed_to_every_kind(logger):
    kinds = [_kind('images'), _kind('disks')]

    Leftovers(kinds, logger).delete('banana')

    for kind in kinds:
        kind.list.assert_called_once_with('banana')


def test_listing_error_halts_run(logger):
    images = _kind('images')
    images.list.side_effect = TransportError('images', '', 'some error')
    disks = _kind('disks')

    with pytest.raises(TransportError):
        Leftovers([images, disks], logger).delete('')

    disks.list.assert_not_called()


def test_item_failures_are_aggregated(logger):
    failed = DeletionOutcome('banana-disk', 'disk', OutcomeResult.FAILED, 'in use')
    ok = DeletionOutcome('banana-image', 'image', OutcomeResult.SUCCESS)
    kinds = [
        _kind('disks', candidates={'banana-disk': 'zone-1'}, outcomes=[failed]),
        _kind('images', candidates={'banana-image': ''}, outcomes=[ok]),
    ]

    report = Leftovers(kinds, logger).delete('banana')

    assert report.failures == [failed]
    assert report.names('images', OutcomeResult.SUCCESS) == ['banana-image']


def test_print_report(logger):
    report = RunReport()
    report.add('images', [DeletionOutcome('banana-image', 'image', OutcomeResult.SUCCESS)])
    report.add('disks', [DeletionOutcome('banana-disk', 'disk', OutcomeResult.FAILED, 'in use')])

    report.print_report(logger)

    assert '    - banana-image' in logger.lines
    assert '    - banana-disk (in use)' in logger.lines


def test_print_empty_report(logger):
    RunReport().print_report(logger)

    assert logger.lines == ['\nNothing was deleted.']
