from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional
from datetime import datetime
from storefront.services.images import ImageBytes

class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input."""
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True

# --- catalog ---

class CategoryRead(WireModel):
    id: int
    name: str
    slug: str
    image: ImageBytes = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ProductRead(WireModel):
    id: int
    name: str
    price: float
    image: ImageBytes = None
    category: str
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    category_slug: Optional[str] = None
    rating: float = 0
    reviews: int = 0
    in_stock: bool = True
    featured: bool = False
    description: Optional[str] = None
    created_at: Optional[datetime] = None

class CategoryFields(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None

class ProductFields(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    category_id: Optional[int] = None
    rating: Optional[float] = None
    reviews: Optional[int] = None
    in_stock: Optional[bool] = None
    featured: Optional[bool] = None
    description: Optional[str] = None

# --- cart ---

class CartEntry(WireModel):
    product_id: int
    quantity: int = Field(ge=1)

class CartValidateRequest(WireModel):
    items: Any = None

class CartAddRequest(WireModel):
    product_id: Optional[int] = None
    quantity: Optional[int] = None

class CartLine(ProductRead):
    quantity: int

class CartAddResponse(WireModel):
    message: str
    product: ProductRead
    quantity: int

# --- orders ---

class OrderItemIn(WireModel):
    product_id: int
    quantity: int = Field(gt=0)
    price: float = Field(ge=0, allow_inf_nan=False)

class OrderCreate(WireModel):
    items: Optional[List[OrderItemIn]] = None
    total: Optional[float] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_contact: Optional[str] = None

class OrderStatusUpdate(WireModel):
    status: Optional[str] = None

class OrderItemRead(WireModel):
    id: int
    product_id: int
    quantity: int
    price: float

class ProductSnapshot(WireModel):
    id: int
    name: str
    image: ImageBytes = None

class OrderItemDetail(OrderItemRead):
    product: Optional[ProductSnapshot] = None

class OrderHeader(WireModel):
    id: int
    total: float
    status: str
    customer_name: str
    customer_email: str
    customer_contact: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OrderRead(OrderHeader):
    items: List[OrderItemRead] = []

class OrderDetail(OrderHeader):
    items: List[OrderItemDetail] = []

# --- auth ---

class LoginPayload(BaseModel):
    username: str
    password: str

class RegisterPayload(BaseModel):
    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)

class UserRead(WireModel):
    id: int
    username: str
    email: str
    role: str

class TokenResponse(BaseModel):
    token: str
    user: UserRead
