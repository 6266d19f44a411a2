import logging
from typing import Dict, List

from leftovers.core.dependency_graph import DependencyGraph
from leftovers.core.logging import timed
from leftovers.core.models import DeletionOutcome, OutcomeResult
from leftovers.resources.base import ResourceKind


class RunReport:
    """Outcomes of one run, grouped by resource kind."""

    def __init__(self):
        self.outcomes: Dict[str, List[DeletionOutcome]] = {}

    def add(self, plural: str, outcomes: List[DeletionOutcome]):
        self.outcomes.setdefault(plural, []).extend(outcomes)

    def names(self, plural: str, result: OutcomeResult) -> List[str]:
        return [o.name for o in self.outcomes.get(plural, []) if o.result is result]

    @property
    def failures(self) -> List[DeletionOutcome]:
        return [o for outcomes in self.outcomes.values() for o in outcomes if o.failed]

    def print_report(self, logger):
        if not any(self.outcomes.values()):
            logger.println('\nNothing was deleted.')
            return

        logger.println('\n=== leftovers report ===')
        for plural, outcomes in self.outcomes.items():
            if not outcomes:
                continue
            logger.println(f"\nResource: {plural}")
            for label, result in (('Deleted', OutcomeResult.SUCCESS), ('Skipped', OutcomeResult.SKIPPED)):
                names = self.names(plural, result)
                if names:
                    logger.println(f"  {label}:")
                    for name in names:
                        logger.println(f"    - {name}")
            failed = [o for o in outcomes if o.failed]
            if failed:
                logger.println('  Failed:')
                for o in failed:
                    logger.println(f"    - {o.name} ({o.reason})")


class Leftovers:
    """Runs resource kinds one after another so dependents go first.

    A kind that cannot be listed stops the run; a resource that cannot be
    deleted is only reported.
    """

    def __init__(self, kinds: List[ResourceKind], logger):
        self.logger = logger
        self.kinds = self._ordered(kinds)

    @staticmethod
    def _ordered(kinds: List[ResourceKind]) -> List[ResourceKind]:
        by_name = {k.plural: k for k in kinds}
        graph = DependencyGraph()
        for kind in kinds:
            graph.add_node(kind.plural, kind.prerequisites)

        order = graph.get_execution_order()
        logging.info(f"Deletion order: {[name for name in order if name in by_name]}")
        return [by_name[name] for name in order if name in by_name]

    @timed
    def delete(self, filter: str = '') -> RunReport:
        report = RunReport()
        for kind in self.kinds:
            candidates = kind.list(filter)
            report.add(kind.plural, kind.delete(candidates))
            logging.info(f"{kind.plural}: {len(candidates)} candidate(s)")
        return report
