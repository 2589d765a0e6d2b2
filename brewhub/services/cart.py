"""Single-vendor cart with pluggable snapshot persistence.

A cart holds line items from exactly one vendor. Every mutation writes the
whole cart as a JSON array through a :class:`CartStorage` backend under a
fixed key; a new :class:`CartStore` rehydrates from that key.
"""
import json
import logging
import os
import re
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Dict, List, NamedTuple, Optional

from pydantic import BaseModel, Field, ValidationError

from models import db
from models.cart import CartSnapshot

logger = logging.getLogger(__name__)

CART_KEY = "cart"

CROSS_VENDOR_MESSAGE = (
    "You can only order from one vendor at a time. Clear your cart first."
)


class CartLine(BaseModel):
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int = Field(ge=1)
    vendor_id: int

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class AddOutcome(NamedTuple):
    added: bool
    message: str


class CartStorage(ABC):
    """Key/value persistence for serialized carts.

    ``transactional`` backends write through the database session, so their
    saves commit or roll back with it; the others write immediately.
    """

    transactional = False

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def save(self, key: str, payload: str) -> None:
        ...


class MemoryCartStorage(CartStorage):
    def __init__(self):
        self._data: Dict[str, str] = {}

    def load(self, key):
        return self._data.get(key)

    def save(self, key, payload):
        self._data[key] = payload


class FileCartStorage(CartStorage):
    """One JSON file per key inside ``directory``."""

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, key: str) -> str:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return os.path.join(self.directory, f"{safe}.json")

    def load(self, key):
        try:
            with open(self._path(key), encoding="utf-8") as fh:
                return fh.read()
        except FileNotFoundError:
            return None

    def save(self, key, payload):
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp = f"{path}.tmp"
        with open(tmp, "w", encoding="utf-8") as fh:
            fh.write(payload)
        os.replace(tmp, path)


class DatabaseCartStorage(CartStorage):
    """Stores snapshots in ``cart_snapshot``; the caller commits."""

    transactional = True

    def load(self, key):
        row = CartSnapshot.query.filter_by(key=key).first()
        return row.payload if row else None

    def save(self, key, payload):
        row = CartSnapshot.query.filter_by(key=key).first()
        if row is None:
            row = CartSnapshot(key=key)
            db.session.add(row)
        row.payload = payload


def user_cart_key(user_id: str) -> str:
    return f"{CART_KEY}:{user_id}"


class CartStore:
    def __init__(self, storage: CartStorage, key: str = CART_KEY):
        self._storage = storage
        self._key = key
        self._lines: List[CartLine] = []
        self._rehydrate()

    @property
    def key(self) -> str:
        return self._key

    @property
    def transactional(self) -> bool:
        return self._storage.transactional

    @property
    def items(self) -> List[CartLine]:
        return [line.model_copy() for line in self._lines]

    def __len__(self):
        return len(self._lines)

    def line(self, product_id: int) -> Optional[CartLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line.model_copy()
        return None

    def add_item(self, product, qty: int = 1) -> AddOutcome:
        """Add ``qty`` units of ``product``.

        ``product`` needs ``id``, ``name``, ``price`` and ``vendor_id``.
        A product from another vendor is refused without touching the cart.
        """
        if qty < 1:
            raise ValueError("quantity must be at least 1")
        current_vendor = self.vendor_id()
        if current_vendor is not None and current_vendor != product.vendor_id:
            logger.info(
                "cart %s rejected product %s from vendor %s (cart vendor %s)",
                self._key, product.id, product.vendor_id, current_vendor,
            )
            return AddOutcome(False, CROSS_VENDOR_MESSAGE)

        for line in self._lines:
            if line.product_id == product.id:
                line.quantity += qty
                self._persist()
                return AddOutcome(True, f"{product.name} quantity updated in cart")

        self._lines.append(
            CartLine(
                product_id=product.id,
                name=product.name,
                unit_price=Decimal(str(product.price)),
                quantity=qty,
                vendor_id=product.vendor_id,
            )
        )
        self._persist()
        return AddOutcome(True, f"{product.name} added to cart")

    def remove_item(self, product_id: int) -> bool:
        remaining = [line for line in self._lines if line.product_id != product_id]
        if len(remaining) == len(self._lines):
            return False
        self._lines = remaining
        self._persist()
        return True

    def set_quantity(self, product_id: int, qty: int) -> None:
        if qty <= 0:
            self.remove_item(product_id)
            return
        for line in self._lines:
            if line.product_id == product_id:
                line.quantity = qty
                self._persist()
                return

    def clear(self) -> None:
        self._lines = []
        self._persist()

    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    def total_price(self) -> Decimal:
        return sum((line.line_total for line in self._lines), Decimal("0"))

    def vendor_id(self) -> Optional[int]:
        return self._lines[0].vendor_id if self._lines else None

    def to_dict(self):
        return {
            "vendor_id": self.vendor_id(),
            "items": [
                {
                    "product_id": line.product_id,
                    "name": line.name,
                    "unit_price": float(line.unit_price),
                    "quantity": line.quantity,
                    "subtotal": float(line.line_total),
                }
                for line in self._lines
            ],
            "total_items": self.total_items(),
            "total_price": float(self.total_price()),
        }

    def _persist(self) -> None:
        payload = json.dumps([line.model_dump(mode="json") for line in self._lines])
        self._storage.save(self._key, payload)

    def _rehydrate(self) -> None:
        raw = self._storage.load(self._key)
        if not raw:
            return
        try:
            lines = [CartLine.model_validate(entry) for entry in json.loads(raw)]
        except (ValueError, TypeError, ValidationError) as e:
            logger.warning("discarding unreadable cart snapshot %s: %s", self._key, e)
            return
        if len({line.vendor_id for line in lines}) > 1:
            logger.warning("discarding cart snapshot %s spanning vendors", self._key)
            return
        self._lines = lines


__all__ = [
    "CART_KEY",
    "CROSS_VENDOR_MESSAGE",
    "AddOutcome",
    "CartLine",
    "CartStorage",
    "CartStore",
    "DatabaseCartStorage",
    "FileCartStorage",
    "MemoryCartStorage",
    "user_cart_key",
]
