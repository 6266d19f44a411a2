from abc import ABC, abstractmethod
from typing import Any, List, Optional

from botocore.exceptions import ClientError

from leftovers.core.deleter import delete_candidates
from leftovers.core.errors import NotFoundError
from leftovers.core.models import CandidateSet, DeletionOutcome, ResourceDescriptor
from leftovers.core.operation import Operation, OperationWaiter
from leftovers.core.paginate import collect
from leftovers.core.retry import retry_throttled
from leftovers.core.selection import select


class ResourceKind(ABC):
    """One category of cloud object driven through list, filter, confirm and delete.

    Subclasses supply how to collect raw items, how to describe one, and how to
    delete one by name. Everything else is shared.
    """

    type_name = ''
    plural = ''

    def __init__(self, logger, dry_run: bool = False, waiter: Optional[OperationWaiter] = None):
        self.logger = logger
        self.dry_run = dry_run
        self.waiter = waiter

    @property
    def prerequisites(self) -> List[str]:
        """Kinds (by plural name) that must be deleted before this one."""
        return []

    @abstractmethod
    def collect(self) -> List[Any]:
        pass

    @abstractmethod
    def describe(self, item: Any) -> ResourceDescriptor:
        pass

    @abstractmethod
    def delete_one(self, name: str, location: str) -> Optional[Operation]:
        pass

    def list(self, filter: str) -> CandidateSet:
        return select(self.collect(), self.describe, filter, self.logger, self.type_name)

    def delete(self, candidates: CandidateSet) -> List[DeletionOutcome]:
        return delete_candidates(self.type_name, candidates, self.delete_one, self.logger,
                                 waiter=self.waiter, dry_run=self.dry_run)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.plural}>"


class AWSResourceKind(ResourceKind):
    """ResourceKind backed by a boto3 client. AWS deletes are synchronous."""

    not_found_codes: List[str] = []

    def __init__(self, client, logger, dry_run: bool = False, list_max_attempts: int = 5):
        super().__init__(logger, dry_run=dry_run)
        self.client = client
        self.list_max_attempts = list_max_attempts

    def _pages(self, method: str, result_key: str, token_in: str, token_out: str, **kwargs) -> List[Any]:
        """Collect every page of a boto3 list/describe call."""
        call = getattr(self.client, method)

        def fetch_page(token):
            params = dict(kwargs)
            if token:
                params[token_in] = token
            resp = retry_throttled(lambda: call(**params), f"{method} page", self.list_max_attempts)
            return resp.get(result_key, []), resp.get(token_out)

        return collect(fetch_page, self.plural)

    def _call(self, operation):
        """Run a mutating call, turning the kind's not-found codes into NotFoundError."""
        try:
            return operation()
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code', '')
            if code in self.not_found_codes:
                raise NotFoundError(f"{self.type_name} not found: {code}") from e
            raise
