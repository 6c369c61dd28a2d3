from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from freshbill.utils.money import to_decimal, to_json_number


@dataclass(frozen=True)
class Product:
    """A purchasable item from the static table or the catalog feed."""

    id: int | str
    name: str
    price: Decimal
    category: str = "Fruits"

    @property
    def render_key(self) -> str:
        """Row identity: a price change on the feed yields a new key."""
        return f"{self.id}:{self.price}"

    @classmethod
    def from_dict(cls, d: dict) -> Product:
        return cls(
            id=d["id"],
            name=d["name"],
            price=to_decimal(d["price"]),
            category=d.get("category", "Fruits"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": to_json_number(self.price),
            "category": self.category,
        }


DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(1, "Apple", Decimal("150")),
    Product(2, "Banana", Decimal("80")),
    Product(3, "Orange", Decimal("120")),
    Product(4, "Mango", Decimal("250")),
    Product(5, "Pineapple", Decimal("300")),
    Product(6, "Watermelon", Decimal("450")),
    Product(7, "Grapes", Decimal("280")),
    Product(8, "Strawberry", Decimal("350")),
    Product(9, "Kiwi", Decimal("180")),
    Product(10, "Pomegranate", Decimal("220")),
)
