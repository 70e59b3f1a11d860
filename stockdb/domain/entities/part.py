"""Domain entity for a stocked part: keyed by its manufacturer part number (MPN)."""

from dataclasses import dataclass, fields, replace
from enum import Enum


class PartParameter(str, Enum):
    """The fixed set of named parameters carried by every part."""

    MPN = "mpn"
    MANUFACTURER = "manufacturer"
    DESCRIPTION = "description"
    CATEGORY = "category"
    LOCATION = "location"        # storage location
    STOCK = "stock"
    LOW_STOCK = "low_stock"      # reorder threshold
    PRICE = "price"
    SUPPLIER = "supplier"        # preferred supplier
    SPN = "spn"                  # supplier part number

    @classmethod
    def parse(cls, value: "PartParameter | str") -> "PartParameter":
        """Accept a member, its value ("low_stock") or its name ("LOW_STOCK").

        Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        try:
            return cls(text.lower())
        except ValueError:
            pass
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown part parameter: {value!r}") from None


def _to_float(raw: str) -> float:
    try:
        return float(raw.strip().replace(",", "."))
    except ValueError:
        return 0.0


@dataclass
class Part:
    """Core domain entity: one stocked component.

    Every parameter is stored as text, numeric ones included; the ``*_value``
    properties parse them at read time (unparseable text reads as 0.0).
    The MPN of a part held by a store must only change through the store's
    rename path so the store's key stays in sync.
    """

    mpn: str
    manufacturer: str = ""
    description: str = ""
    category: str = ""
    location: str = ""
    stock: str = ""
    low_stock: str = ""
    price: str = ""
    supplier: str = ""
    spn: str = ""

    def __post_init__(self) -> None:
        if not self.mpn or not self.mpn.strip():
            raise ValueError("Part MPN cannot be empty")
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str):
                setattr(self, f.name, "" if value is None else str(value))

    @classmethod
    def from_parameters(cls, values: dict[PartParameter | str, str]) -> "Part":
        """Build a part from a parameter mapping; missing parameters default to ''."""
        kwargs = {PartParameter.parse(k).value: v for k, v in values.items()}
        return cls(**kwargs)

    @property
    def parameters(self) -> dict[PartParameter, str]:
        """Parameter-name → text mapping (a fresh dict; edits do not write back)."""
        return {param: getattr(self, param.value) for param in PartParameter}

    def get(self, parameter: PartParameter | str) -> str:
        return getattr(self, PartParameter.parse(parameter).value)

    def set(self, parameter: PartParameter | str, value: str) -> None:
        setattr(self, PartParameter.parse(parameter).value, "" if value is None else str(value))

    def clone_for_history(self) -> "Part":
        """Return an independent value copy used as a before/after snapshot."""
        return replace(self)

    # ── Numeric views ───────────────────────────────────────────────

    @property
    def stock_value(self) -> float:
        return _to_float(self.stock)

    @property
    def low_stock_value(self) -> float:
        return _to_float(self.low_stock)

    @property
    def price_value(self) -> float:
        return _to_float(self.price)

    @property
    def is_low_stock(self) -> bool:
        """True when the stock has fallen under the low-stock threshold."""
        return self.stock_value < self.low_stock_value
