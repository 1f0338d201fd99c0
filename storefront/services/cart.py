"""Checkout-time cart checks. Carts live in the client; nothing is stored here."""
from typing import Any, List, Optional

from pydantic import ValidationError as ShapeError
from sqlalchemy.orm import Session

from storefront.core.errors import InvalidInput, NotFound, ValidationError
from storefront.schemas import CartAddResponse, CartEntry, CartLine
from storefront.services.catalog import CatalogStore


def validate_cart(db: Session, items: Any) -> List[CartLine]:
    """Re-read every cart entry against the catalog.

    Malformed entries and entries whose product no longer exists are dropped
    without an error; callers compare lengths to notice.
    """
    if not isinstance(items, list):
        raise InvalidInput('Items must be an array')
    store = CatalogStore(db)
    lines = []
    for it in items:
        try:
            entry = CartEntry.model_validate(it)
            product = store.get_product(entry.product_id)
        except (ShapeError, NotFound):
            continue
        lines.append(CartLine(**dict(product), quantity=entry.quantity))
    return lines


def check_product(db: Session, product_id: Optional[int], quantity: Optional[int]) -> CartAddResponse:
    if not product_id or not quantity:
        raise ValidationError('Product ID and quantity are required')
    try:
        product = CatalogStore(db).get_product(product_id)
    except NotFound:
        product = None
    if product is None or not product.in_stock:
        raise NotFound('Product not found or out of stock')
    return CartAddResponse(message='Product added to cart', product=product, quantity=quantity)
