"""leftovers CLI entry point."""
import argparse
import logging
import sys

import yaml

from leftovers.cleaner import Leftovers
from leftovers.core.config import load_config
from leftovers.core.errors import LeftoversError
from leftovers.core.logging import setup_logging, get_run_id
from leftovers.core.prompt import Logger
from leftovers.providers import build_kinds_for


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='leftovers - delete what is left in a cloud account')
    parser.add_argument('--config', '-c', help='Path to YAML config file')
    parser.add_argument('--iaas', dest='provider', choices=['aws', 'gcp'], help='Cloud provider to clean')
    parser.add_argument('--filter', '-f', help='Only delete resources whose name contains this string')
    parser.add_argument('-n', '--no-confirm', action='store_true',
                        help='Destroy resources without prompting. THIS IS DANGEROUS, MAKE GOOD CHOICES!')
    parser.add_argument('--dry-run', action='store_true', help='List and confirm, but delete nothing')
    parser.add_argument('--type', dest='resource_types', action='append',
                        help='Resource type to clean, e.g. "instances" (repeatable, default: all)')
    parser.add_argument('--aws-access-key-id', help='AWS access key id (env AWS_ACCESS_KEY_ID)')
    parser.add_argument('--aws-secret-access-key', help='AWS secret access key (env AWS_SECRET_ACCESS_KEY)')
    parser.add_argument('--aws-region', help='AWS region (env AWS_REGION)')
    parser.add_argument('--gcp-service-account-key',
                        help='Path to a GCP service account key (env GOOGLE_APPLICATION_CREDENTIALS)')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Verbosity: -v=INFO, -vv=DEBUG')
    parser.add_argument('--json-logs', action='store_true',
                        help='Output logs in JSON format')
    return parser.parse_args(argv)


def apply_args(config, args):
    """CLI args override config."""
    if args.provider:
        config.provider = args.provider
    if args.filter is not None:
        config.filter = args.filter
    if args.no_confirm:
        config.no_confirm = True
    if args.dry_run:
        config.dry_run = True
    if args.resource_types:
        config.resource_types = args.resource_types
    if args.aws_access_key_id:
        config.aws.access_key_id = args.aws_access_key_id
    if args.aws_secret_access_key:
        config.aws.secret_access_key = args.aws_secret_access_key
    if args.aws_region:
        config.aws.region = args.aws_region
    if args.gcp_service_account_key:
        config.gcp.service_account_key = args.gcp_service_account_key
    if args.verbose:
        config.verbosity = args.verbose
    if args.json_logs:
        config.json_logs = True
    return config


def main(argv=None, logger=None):
    args = parse_args(argv)

    try:
        config = apply_args(load_config(args.config), args)
        config.validate()
    except (OSError, ValueError, yaml.YAMLError) as e:
        logging.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(config.verbosity, config.json_logs)
    logging.info(f"leftovers run_id={get_run_id()} provider={config.provider} dry_run={config.dry_run}",
                 extra={'provider': config.provider})

    logger = logger or Logger()
    if config.no_confirm:
        logger.no_confirm()

    try:
        kinds = build_kinds_for(config, logger)
        report = Leftovers(kinds, logger).delete(config.filter)
    except LeftoversError as e:
        logging.error(str(e))
        return 1
    except KeyboardInterrupt:
        logging.info("Cancelled by user")
        return 130

    report.print_report(logger)
    if report.failures:
        logging.warning(f"{len(report.failures)} resource(s) could not be deleted")
    return 0


if __name__ == '__main__':
    sys.exit(main())
