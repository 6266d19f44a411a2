from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

# Resource name -> location ("" for global resources).
CandidateSet = Dict[str, str]

LocationIndex = Mapping[str, str]


@dataclass(frozen=True)
class ResourceDescriptor:
    name: str
    location: str = ''
    kind: str = ''


class OutcomeResult(Enum):
    SUCCESS = 'success'
    SKIPPED = 'skipped'
    FAILED = 'failed'


@dataclass(frozen=True)
class DeletionOutcome:
    name: str
    kind: str
    result: OutcomeResult
    reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.result is OutcomeResult.FAILED


def build_location_index(*mappings: Mapping[str, str]) -> LocationIndex:
    """Merge region/zone lookups into one read-only index."""
    merged: Dict[str, str] = {}
    for mapping in mappings:
        merged.update(mapping)
    return MappingProxyType(merged)


def short_location(value: str, index: LocationIndex) -> str:
    """Resolve a location URL to its short name, falling back to the last path segment."""
    if not value:
        return ''
    if value in index:
        return index[value]
    return value.rstrip('/').rsplit('/', 1)[-1]
