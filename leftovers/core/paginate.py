import logging
import time
from typing import Any, Callable, List, Optional, Tuple

from leftovers.core.errors import TransportError

PAGE_DELAY = 1

PageFetcher = Callable[[Optional[str]], Tuple[List[Any], Optional[str]]]


def collect(fetch_page: PageFetcher, kind: str, scope: str = '') -> List[Any]:
    """Fetch every page of a resource kind and return the items as one list.

    Args:
        fetch_page: Called with the page token (None for the first page),
            returns ``(items, next_token)``. An empty or None token ends the walk.
        kind: Plural resource kind, used in error messages.
        scope: Location context such as ``"zone us-east1-b"``; empty for global.

    Raises:
        TransportError: If any page fetch fails. No partial results are returned.
    """
    items: List[Any] = []
    token = None
    pages = 0
    while True:
        try:
            page, token = fetch_page(token)
        except Exception as e:
            raise TransportError(kind, scope, e) from e
        items.extend(page or [])
        pages += 1
        if not token:
            break
        time.sleep(PAGE_DELAY)

    logging.debug(f"Collected {len(items)} {kind} in {pages} page(s){' for ' + scope if scope else ''}")
    return items
