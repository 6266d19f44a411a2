import logging
from typing import Callable, List, Optional

from leftovers.core.errors import NotFoundError
from leftovers.core.models import CandidateSet, DeletionOutcome, OutcomeResult
from leftovers.core.operation import Operation, OperationWaiter

DeleteOne = Callable[[str, str], Optional[Operation]]


def _fields(kind: str, name: str, location: str) -> dict:
    return {'resource_type': kind, 'resource_name': name, 'location': location or 'global'}


def delete_candidates(kind: str, candidates: CandidateSet, delete_one: DeleteOne, logger,
                      waiter: Optional[OperationWaiter] = None,
                      dry_run: bool = False) -> List[DeletionOutcome]:
    """Delete every candidate, returning one outcome per entry.

    A failure on one resource is recorded and the batch carries on. Resources
    the provider reports as missing count as deleted.
    """
    outcomes = []
    for name, location in candidates.items():
        fields = _fields(kind, name, location)
        if dry_run:
            logger.printf("SKIPPED deleting %s %s (dry run)\n", kind, name)
            outcomes.append(DeletionOutcome(name, kind, OutcomeResult.SKIPPED, 'dry run'))
            continue

        try:
            operation = delete_one(name, location)
            if operation is not None:
                if waiter is None:
                    raise RuntimeError(f"no operation waiter configured for {kind}")
                waiter.wait(operation)
        except NotFoundError:
            logging.info(f"{kind} {name} was already deleted", extra=fields)
        except Exception as e:
            logging.debug(f"Deleting {kind} {name} failed", exc_info=True, extra=fields)
            logger.printf("ERROR deleting %s %s: %s\n", kind, name, e)
            outcomes.append(DeletionOutcome(name, kind, OutcomeResult.FAILED, str(e)))
            continue

        logging.info(f"Deleted {kind} {name}", extra=fields)
        logger.printf("SUCCESS deleting %s %s\n", kind, name)
        outcomes.append(DeletionOutcome(name, kind, OutcomeResult.SUCCESS))

    return outcomes
