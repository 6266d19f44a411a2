from unittest.mock import MagicMock, patch
from leftovers import cli
from leftovers.core.errors import CredentialsError, TransportError
from leftovers.core.models import DeletionOutcome, OutcomeResult


def _kind(outcomes):
    kind = MagicMock()
    kind.plural = 'images'
    kind.prerequisites = []
    kind.list.return_value = {'banana-image': ''}
    kind.delete.return_value = outcomes
    return kind


@patch('leftovers.cli.setup_logging')
def test_exit_zero_despite_item_failures(mock_setup, logger):
    failed = DeletionOutcome('banana-image', 'image', OutcomeResult.FAILED, 'some error')
    with patch('leftovers.cli.build_kinds_for', return_value=[_kind([failed])]) as build:
        code = cli.main(['--iaas', 'gcp', '--filter', 'banana'], logger=logger)

    assert code == 0
    config = build.call_args.args[0]
    assert config.provider == 'gcp'
    assert config.filter == 'banana'


@patch('leftovers.cli.setup_logging')
def test_missing_credentials_exit_non_zero(mock_setup, logger):
    with patch('leftovers.cli.build_kinds_for', side_effect=CredentialsError('Missing AWS_REGION.')):
        assert cli.main(['--iaas', 'aws'], logger=logger) == 1


@patch('leftovers.cli.setup_logging')
def test_listing_failure_exit_non_zero(mock_setup, logger):
    kind = _kind([])
    kind.list.side_effect = TransportError('images', '', 'some error')
    with patch('leftovers.cli.build_kinds_for', return_value=[kind]):
        assert cli.main(['--iaas', 'gcp'], logger=logger) == 1


def test_unknown_provider_exit_non_zero(logger):
    assert cli.main([], logger=logger) == 1


@patch('leftovers.cli.setup_logging')
def test_no_confirm_switch(mock_setup):
    logger = MagicMock()
    with patch('leftovers.cli.build_kinds_for', return_value=[]):
        cli.main(['--iaas', 'gcp', '-n'], logger=logger)

    logger.no_confirm.assert_called_once()


def test_args_override_config():
    args = cli.parse_args(['--iaas', 'aws', '--aws-region', 'us-east-1', '--dry-run', '--type', 'roles'])
    config = cli.apply_args(cli.load_config(None), args)

    assert config.aws.region == 'us-east-1'
    assert config.dry_run is True
    assert config.resource_types == ['roles']


@patch('leftovers.cli.setup_logging')
def test_location_lookup_failure_exit_non_zero(mock_setup, logger):
    client = MagicMock()
    client.list_regions.side_effect = ConnectionError('network unreachable')
    with patch('leftovers.providers.gcp_client', return_value=client):
        assert cli.main(['--iaas', 'gcp', '-n'], logger=logger) == 1
    client.list_regions.assert_called_once()
