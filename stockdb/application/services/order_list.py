"""Purchase order list: aggregates quantities to buy per MPN."""

import logging
from collections.abc import Iterable

from stockdb.domain.entities import Material, Part

from .data_store import DataStore

logger = logging.getLogger(__name__)


class OrderList:
    """Builds a list of parts to order from low-stock parts and BOM materials.

    Lines are keyed by MPN; adding the same MPN again accumulates its
    quantity. Prices and suppliers are read from the store at query time,
    so lines whose part has disappeared simply drop out of those views.
    """

    def __init__(self) -> None:
        self._lines: dict[str, Material] = {}

    @property
    def lines(self) -> list[Material]:
        """Order lines sorted by MPN."""
        return [self._lines[mpn] for mpn in sorted(self._lines)]

    def quantity_of(self, mpn: str) -> float:
        line = self._lines.get(mpn)
        return line.quantity if line else 0.0

    def __len__(self) -> int:
        return len(self._lines)

    def _add(self, mpn: str, quantity: float) -> None:
        line = self._lines.get(mpn)
        if line is None:
            self._lines[mpn] = Material(mpn=mpn, quantity=quantity)
        else:
            line.quantity += quantity

    def add_low_stock_parts(self, parts: Iterable[Part]) -> int:
        """Order ``low_stock - stock`` of each part; parts not below their threshold are skipped.

        Returns the number of parts that produced or extended a line.
        """
        added = 0
        for part in parts:
            shortfall = part.low_stock_value - part.stock_value
            if shortfall <= 0:
                continue
            self._add(part.mpn, shortfall)
            added += 1
        return added

    def add_materials(self, materials: Iterable[Material], multiplier: float = 1.0) -> int:
        """Order the BOM quantities, times ``multiplier`` (the number of assemblies to build)."""
        if multiplier <= 0:
            raise ValueError(f"multiplier must be positive, got {multiplier}")
        added = 0
        for material in materials:
            self._add(material.mpn, material.quantity * multiplier)
            added += 1
        return added

    def remove(self, mpn: str) -> bool:
        return self._lines.pop(mpn, None) is not None

    def clear(self) -> None:
        self._lines.clear()

    # ── Store-backed views ──────────────────────────────────────────

    def suppliers(self, store: DataStore) -> list[str]:
        """Distinct preferred suppliers of the resolvable lines, sorted."""
        names = set()
        for line in self._lines.values():
            part = store.resolve_material(line)
            if part is not None and part.supplier:
                names.add(part.supplier)
        return sorted(names)

    def filter_by_supplier(self, store: DataStore, supplier: str) -> list[Material]:
        return [
            line
            for line in self.lines
            if (part := store.resolve_material(line)) is not None and part.supplier == supplier
        ]

    def total_price(self, store: DataStore) -> float:
        """Sum of ``price * quantity`` over lines whose part is still in the store."""
        total = 0.0
        for line in self._lines.values():
            part = store.resolve_material(line)
            if part is None:
                logger.debug("Order line %s has no matching part: excluded from total", line.mpn)
                continue
            total += part.price_value * line.quantity
        return total
