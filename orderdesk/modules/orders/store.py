import threading
from typing import Dict, List, Optional, Tuple

from .models import Order


class OrderStore:
    """
    In-memory mirror of the remote order collection.

    Every push replaces the whole snapshot; there is no incremental patching.
    The watch thread writes and request threads read, so swaps happen under a lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._orders: Tuple[Order, ...] = ()
        self._by_id: Dict[str, Order] = {}
        self._quarantined: Tuple[Tuple[str, str], ...] = ()
        self._loaded = False
        self._version = 0

    def replace(self, orders: List[Order], quarantined=()) -> int:
        """Swap in a new snapshot and return the new version number."""
        orders = tuple(orders)
        by_id = {order.external_id: order for order in orders}
        with self._lock:
            self._orders = orders
            self._by_id = by_id
            self._quarantined = tuple(quarantined)
            self._loaded = True
            self._version += 1
            return self._version

    def all(self) -> List[Order]:
        with self._lock:
            return list(self._orders)

    def get(self, external_id: str) -> Optional[Order]:
        with self._lock:
            return self._by_id.get(external_id)

    @property
    def quarantined(self) -> List[Tuple[str, str]]:
        with self._lock:
            return list(self._quarantined)

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def version(self) -> int:
        return self._version
