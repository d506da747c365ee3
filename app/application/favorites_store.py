import json
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List

from pydantic import ValidationError

from app.domain.entities import FavoriteEntry, FavoritesSnapshot, Product
from app.infrastructure.local_store import LocalStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FavoritesStore:
    """
    Liked products, independent of the cart.

    Entries are keyed by product id, so liking twice is a no-op and the first
    date_added is kept. The whole list is written to the LocalStore slot on
    every change and read back once on construction.
    """

    def __init__(self, store: LocalStore, key: str, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self.key = key
        self.clock = clock
        self.drawer_open = False
        self._items: Dict[int, FavoriteEntry] = self._load()

    def _load(self) -> Dict[int, FavoriteEntry]:
        raw = self.store.get(self.key)
        if not raw:
            return {}
        try:
            entries = [FavoriteEntry.model_validate(item) for item in json.loads(raw)]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.warning(f"⚠️ Could not load favorites from '{self.key}': {e}. Starting empty.")
            return {}
        return {entry.id: entry for entry in entries}

    def _persist(self):
        payload = [entry.model_dump(mode="json") for entry in self._items.values()]
        self.store.set(self.key, json.dumps(payload))

    @property
    def items(self) -> List[FavoriteEntry]:
        return list(self._items.values())

    def add_favorite(self, product: Product) -> FavoritesSnapshot:
        if product.id not in self._items:
            self._items[product.id] = FavoriteEntry.from_product(product, self.clock())
            self._persist()
        return self.snapshot()

    def remove_favorite(self, item_id: int) -> FavoritesSnapshot:
        if self._items.pop(item_id, None) is not None:
            self._persist()
        return self.snapshot()

    def is_favorite(self, item_id: int) -> bool:
        return item_id in self._items

    def toggle_drawer(self) -> FavoritesSnapshot:
        self.drawer_open = not self.drawer_open
        return self.snapshot()

    def close_drawer(self) -> FavoritesSnapshot:
        self.drawer_open = False
        return self.snapshot()

    def snapshot(self) -> FavoritesSnapshot:
        items = self.items
        return FavoritesSnapshot(items=items, count=len(items), drawer_open=self.drawer_open)
