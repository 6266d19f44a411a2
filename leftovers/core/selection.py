import logging
from typing import Any, Callable, Iterable

from leftovers.core.errors import CollectorError
from leftovers.core.models import CandidateSet, ResourceDescriptor


def confirm_message(kind: str, name: str) -> str:
    return f"Are you sure you want to delete {kind} {name}?"


def matches(name: str, filter: str) -> bool:
    return filter in name


def select(items: Iterable[Any], describe: Callable[[Any], ResourceDescriptor], filter: str,
           logger, kind: str) -> CandidateSet:
    """Narrow collected items down to the ones the operator agreed to delete.

    Items are considered in collection order. Each item whose name contains
    ``filter`` gets exactly one blocking yes/no prompt.

    Raises:
        CollectorError: If an item cannot be described.
    """
    candidates: CandidateSet = {}
    for item in items:
        try:
            descriptor = describe(item)
        except (KeyError, AttributeError, TypeError) as e:
            raise CollectorError(f"Reading {kind} from listing: {e}") from e

        if not matches(descriptor.name, filter):
            continue

        if descriptor.name in candidates:
            logging.warning(
                f"{kind} {descriptor.name} exists in {candidates[descriptor.name] or 'global'} "
                f"and {descriptor.location or 'global'}; the second one is left for the next run",
                extra={'resource_type': kind, 'resource_name': descriptor.name,
                       'location': descriptor.location or 'global'},
            )
            continue

        if not logger.prompt(confirm_message(kind, descriptor.name)):
            continue

        candidates[descriptor.name] = descriptor.location

    return candidates
