"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import NamedTuple, Optional

from storefront.money import multiply, to_decimal, to_json_number


@dataclass(frozen=True)
class Warranty:
    """Extended warranty add-on; its price is folded into the line item price."""
    duration: str
    price: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "price", to_decimal(self.price))

    def to_dict(self) -> dict:
        return {"duration": self.duration, "price": to_json_number(self.price)}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["Warranty"]:
        if not data:
            return None
        return cls(duration=str(data["duration"]), price=to_decimal(data.get("price")))


class IdentityKey(NamedTuple):
    """Fields that decide whether two additions are the same purchasable configuration."""
    id: str
    color: Optional[str]
    selected_ram: Optional[str]
    selected_storage: Optional[str]
    warranty_duration: Optional[str]


def identity_key(
    id: str,
    color: Optional[str] = None,
    selected_ram: Optional[str] = None,
    selected_storage: Optional[str] = None,
    warranty: Optional[Warranty] = None,
) -> IdentityKey:
    """Build the identity key used to look up a line item."""
    return IdentityKey(
        id=id,
        color=color,
        selected_ram=selected_ram,
        selected_storage=selected_storage,
        warranty_duration=warranty.duration if warranty else None,
    )


@dataclass
class CartLineItem:
    """One product configuration in the cart."""
    id: str
    slug: str
    name: str
    price: Decimal
    image: str
    quantity: int = 1
    color: Optional[str] = None
    selected_ram: Optional[str] = None
    selected_storage: Optional[str] = None
    warranty: Optional[Warranty] = field(default=None)

    def __post_init__(self):
        self.price = to_decimal(self.price)

    @property
    def key(self) -> IdentityKey:
        return identity_key(
            self.id, self.color, self.selected_ram, self.selected_storage, self.warranty
        )

    @property
    def total_price(self) -> Decimal:
        """Price for all units of this line."""
        return multiply(self.price, self.quantity)

    def copy(self, **changes) -> "CartLineItem":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Serialize in the front end's local-storage shape (camelCase, `qty`)."""
        data = {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "price": to_json_number(self.price),
            "image": self.image,
            "qty": self.quantity,
        }
        if self.color is not None:
            data["color"] = self.color
        if self.selected_ram is not None:
            data["selectedRam"] = self.selected_ram
        if self.selected_storage is not None:
            data["selectedStorage"] = self.selected_storage
        if self.warranty is not None:
            data["warranty"] = self.warranty.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CartLineItem":
        """Create from a stored entry; a missing `qty` means 1."""
        return cls(
            id=str(data["id"]),
            slug=data.get("slug", ""),
            name=data.get("name", ""),
            price=to_decimal(data.get("price")),
            image=data.get("image", ""),
            quantity=int(data.get("qty") or 1),
            color=data.get("color"),
            selected_ram=data.get("selectedRam"),
            selected_storage=data.get("selectedStorage"),
            warranty=Warranty.from_dict(data.get("warranty")),
        )
