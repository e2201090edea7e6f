# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel
from typing import Annotated, List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.enums import OrderStatus, PaymentStatus


# Decimal in the database, plain number in JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# CATALOG
# =====================================================
class CategoryCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None


class CategoryUpdate(ApiModel):
    id: int = Field(..., gt=0)
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None


class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    created_at: datetime


class CategoryWithCountOut(CategoryOut):
    products_count: int = 0


class ProductCreate(ApiModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    product_number: str = Field(..., min_length=1, max_length=64)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    category_id: int = Field(..., gt=0)
    image_url: str = Field(..., min_length=1)
    images: Optional[List[str]] = None
    is_active: bool = True

    @field_validator("stock", mode="before")
    @classmethod
    def _empty_stock(cls, value):
        return 0 if _blank_to_none(value) is None else value


class ProductUpdate(ApiModel):
    """Partial patch, fields left out (or blank price/stock) stay unchanged."""

    id: int = Field(..., gt=0)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    product_number: Optional[str] = Field(None, min_length=1, max_length=64)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = Field(None, min_length=1)
    images: Optional[List[str]] = None
    is_active: Optional[bool] = None

    @field_validator("price", "stock", mode="before")
    @classmethod
    def _blank_numbers(cls, value):
        return _blank_to_none(value)


class ProductSummaryOut(ApiModel):
    id: int
    name: str
    product_number: str
    image_url: str
    price: Money
    stock: int
    is_active: bool


class ProductOut(ApiModel):
    id: int
    name: str
    description: Optional[str] = None
    product_number: str
    price: Money
    stock: int
    category_id: int
    image_url: str
    images: Optional[List[str]] = None
    is_active: bool
    created_at: datetime
    category: Optional[CategoryOut] = None


# =====================================================
# SAVED CARTS
# =====================================================
class SavedCartItemIn(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    price_at_add: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class SavedCartCreate(ApiModel):
    email: Optional[EmailStr] = None
    items: List[SavedCartItemIn] = Field(default_factory=list)

    @field_validator("email", mode="before")
    @classmethod
    def _empty_email(cls, value):
        return _blank_to_none(value)


class SavedCartItemOut(ApiModel):
    id: int
    product_id: Optional[int] = None
    quantity: int
    price_at_add: Money
    product: Optional[ProductSummaryOut] = None


class SavedCartOut(ApiModel):
    id: int
    cart_code: str
    email: Optional[str] = None
    total_amount: Money
    expires_at: datetime
    created_at: datetime
    items: List[SavedCartItemOut]


class SavedCartListOut(SavedCartOut):
    item_count: int = 0
    is_expired: bool = False


# =====================================================
# ORDERS
# =====================================================
class OrderItemOut(ApiModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    product_number: str
    quantity: int
    price: Money


class OrderOut(ApiModel):
    id: int
    order_number: str
    cart_code: Optional[str] = None
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    shipping_city: Optional[str] = None
    shipping_state: Optional[str] = None
    status: OrderStatus
    total: Money
    payment_method: str
    payment_status: str
    created_at: datetime
    items: List[OrderItemOut]


class OrderUpdate(ApiModel):
    """Only status and paymentStatus are writable, anything else is ignored."""

    id: int = Field(..., gt=0)
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None


class CheckoutItemIn(ApiModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class CheckoutIn(ApiModel):
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=40)
    shipping_city: Optional[str] = Field(None, max_length=120)
    shipping_state: Optional[str] = Field(None, max_length=120)
    payment_method: str = Field(..., min_length=1, max_length=40)
    cart_code: Optional[str] = Field(None, max_length=16)
    items: List[CheckoutItemIn] = Field(default_factory=list)


# =====================================================
# GUEST CART
# =====================================================
class CartLine(ApiModel):
    """One line of the guest cart, as persisted by a CartStorage."""

    id: str
    product_id: int
    name: str
    product_number: str
    image: str
    price: Money
    quantity: int
    stock: int


class CartStateOut(ApiModel):
    items: List[CartLine]
    item_count: int = 0
    total: Money


class CartItemAddIn(ApiModel):
    product_id: int = Field(..., gt=0)


class CartQuantityIn(ApiModel):
    quantity: int


class CartSaveIn(ApiModel):
    email: Optional[EmailStr] = None

    @field_validator("email", mode="before")
    @classmethod
    def _empty_email(cls, value):
        return _blank_to_none(value)


class CartLoadIn(ApiModel):
    cart_code: str = Field(..., min_length=1, max_length=16)


class CartCountOut(ApiModel):
    count: int


class CartEmailItem(ApiModel):
    name: str
    product_number: str
    quantity: int = Field(..., ge=1)
    price: Money


class CartEmailIn(ApiModel):
    email: EmailStr
    cart_code: str = Field(..., min_length=1)
    items: List[CartEmailItem]
    total: Money


class MessageOut(ApiModel):
    message: str


class CartEmailOut(ApiModel):
    success: bool
    message: str
