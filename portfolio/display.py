"""State behind the public portfolio sections.

A section loads its collection once, sorts it, then shows a fixed number of
items until the visitor asks for all of them. Fetch failures never reach the
visitor: they are logged and the section renders as empty.
"""

import logging
from typing import Callable, Dict, List, Optional

from .admin_client import ApiError, PortfolioClient

logger = logging.getLogger(__name__)

LOADING = "loading"
EMPTY = "empty"
READY = "ready"

# Items shown before "Show All" on the home page
SECTION_LIMITS = {
    "projects": 6,
    "certifications": 5,
    "awards": 4,
}


class ExpansionState:
    """Which cards have their long description expanded ("read more")."""

    def __init__(self):
        self._expanded = set()

    def toggle(self, item_id) -> bool:
        if item_id in self._expanded:
            self._expanded.discard(item_id)
            return False
        self._expanded.add(item_id)
        return True

    def is_expanded(self, item_id) -> bool:
        return item_id in self._expanded

    def collapse_all(self):
        self._expanded.clear()


class PublicDisplay:
    def __init__(
        self,
        client: PortfolioClient,
        entity: str,
        params: Optional[Dict[str, str]] = None,
        sort_key: Optional[Callable] = None,
        page_size: Optional[int] = None,
        home_flag: Optional[str] = None,
    ):
        self.client = client
        self.entity = entity
        self.params = params or {}
        self.sort_key = sort_key
        self.page_size = page_size or SECTION_LIMITS.get(entity, 6)
        # when set, the collapsed view only shows items with this flag on
        self.home_flag = home_flag
        self.state = LOADING
        self.items: List[dict] = []
        self.show_all = False
        self.expansion = ExpansionState()

    def load(self) -> str:
        self.state = LOADING
        try:
            items = self.client.list(self.entity, **self.params) or []
        except ApiError as exc:
            logger.error("Failed to load %s: %s", self.entity, exc.message)
            items = []
        if self.sort_key is not None:
            items = sorted(items, key=self.sort_key)
        self.items = items
        self.show_all = False
        self.state = READY if items else EMPTY
        return self.state

    def _collapsed(self) -> List[dict]:
        pool = self.items
        if self.home_flag:
            pool = [item for item in pool if item.get(self.home_flag)]
        return pool[: self.page_size]

    @property
    def visible(self) -> List[dict]:
        return list(self.items) if self.show_all else self._collapsed()

    @property
    def hidden_count(self) -> int:
        return len(self.items) - len(self.visible)

    @property
    def has_more(self) -> bool:
        return not self.show_all and self.hidden_count > 0

    def show_more(self) -> List[dict]:
        self.show_all = True
        return self.visible

    def show_less(self) -> List[dict]:
        self.show_all = False
        return self.visible

    def partition(self, flag: str):
        """(flagged items, every item), both in display order."""
        return [item for item in self.items if item.get(flag)], list(self.items)
