"""
API Pydantic Models

Request bodies accept the front end's camelCase names (`selectedRam`,
`selectedStorage`) as well as snake_case.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from storefront.cart import CartLineItem, Warranty
from storefront.wishlist import WishlistItem


# ==================== CART MODELS ====================

class WarrantyModel(BaseModel):
    duration: str
    price: float = Field(default=0, ge=0, allow_inf_nan=False)

    def to_warranty(self) -> Warranty:
        return Warranty(duration=self.duration, price=self.price)


def _warranty(model: Optional[WarrantyModel]) -> Optional[Warranty]:
    return model.to_warranty() if model else None


class LineItemSelector(BaseModel):
    """Identity key fields of a cart line."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    color: str | None = None
    selected_ram: str | None = Field(default=None, alias="selectedRam")
    selected_storage: str | None = Field(default=None, alias="selectedStorage")


class AddToCartRequest(LineItemSelector):
    slug: str
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    image: str = ""
    warranty: WarrantyModel | None = None

    def to_line_item(self) -> CartLineItem:
        return CartLineItem(
            id=self.id,
            slug=self.slug,
            name=self.name,
            price=self.price,
            image=self.image,
            color=self.color,
            selected_ram=self.selected_ram,
            selected_storage=self.selected_storage,
            warranty=_warranty(self.warranty),
        )


class UpdateCartItemRequest(LineItemSelector):
    quantity: int  # <= 0 removes the line
    warranty: WarrantyModel | None = None

    def get_warranty(self) -> Optional[Warranty]:
        return _warranty(self.warranty)


class RemoveCartItemRequest(LineItemSelector):
    warranty: WarrantyModel | None = None

    def get_warranty(self) -> Optional[Warranty]:
        return _warranty(self.warranty)


class UpdateWarrantyRequest(LineItemSelector):
    new_warranty: WarrantyModel | None = Field(default=None, alias="newWarranty")
    current_warranty: WarrantyModel | None = Field(default=None, alias="currentWarranty")


class ApplyPromoRequest(BaseModel):
    code: str


# ==================== WISHLIST MODELS ====================

class WishlistItemRequest(BaseModel):
    id: str = Field(min_length=1)
    slug: str
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    image: str = ""
    description: str | None = None

    def to_wishlist_item(self) -> WishlistItem:
        return WishlistItem(
            id=self.id,
            slug=self.slug,
            name=self.name,
            price=self.price,
            image=self.image,
            description=self.description,
        )
