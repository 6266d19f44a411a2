"""Polling for provider-side asynchronous operations.

Some providers accept a delete request and hand back an operation that
completes later. OperationWaiter turns that handle into a blocking call with a
bounded wall-clock budget.
"""
import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional

from leftovers.core.errors import OperationError, OperationTimeoutError

DEFAULT_POLL_INTERVAL = 2
DEFAULT_TIMEOUT = 600


class OperationStatus(Enum):
    PENDING = 'PENDING'
    RUNNING = 'RUNNING'
    DONE = 'DONE'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'OperationStatus':
        try:
            return cls(value)
        except ValueError:
            # Unknown provider states are treated as in-flight.
            return cls.RUNNING


_ORDER = {OperationStatus.PENDING: 0, OperationStatus.RUNNING: 1, OperationStatus.DONE: 2}


@dataclass(frozen=True)
class Operation:
    id: str
    status: OperationStatus = OperationStatus.PENDING
    error_detail: Optional[str] = None
    target_link: str = ''
    scope: str = 'global'
    location: str = ''

    @property
    def done(self) -> bool:
        return self.status is OperationStatus.DONE


class OperationWaiter:
    """Poll an operation until it is DONE, fails, or runs out of time.

    Args:
        refresh: Returns the latest view of an operation from the provider.
        interval: Seconds to sleep between non-terminal polls.
        timeout: Maximum wall-clock seconds to wait for a terminal state.
    """

    def __init__(self, refresh: Callable[[Operation], Operation],
                 interval: float = DEFAULT_POLL_INTERVAL, timeout: float = DEFAULT_TIMEOUT):
        self.refresh = refresh
        self.interval = interval
        self.timeout = timeout

    def wait(self, operation: Operation) -> Operation:
        deadline = time.monotonic() + self.timeout
        current = operation
        polls = 0
        while True:
            latest = self.refresh(current)
            polls += 1
            current = self._advance(current, latest)

            if current.done:
                if current.error_detail:
                    raise OperationError(current.error_detail, current.id)
                logging.debug(f"Operation {current.id} finished after {polls} poll(s)")
                return current

            if time.monotonic() >= deadline:
                raise OperationTimeoutError(current.id, self.timeout)

            logging.debug(f"Operation {current.id} is {current.status.value}, polling again in {self.interval}s")
            time.sleep(self.interval)

    @staticmethod
    def _advance(current: Operation, latest: Operation) -> Operation:
        # States only move forward.
        if _ORDER[latest.status] < _ORDER[current.status]:
            return replace(latest, status=current.status)
        return latest
