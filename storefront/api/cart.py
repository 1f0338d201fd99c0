from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.orm import Session
from storefront.api.deps import get_db
from storefront.schemas import CartAddRequest, CartAddResponse, CartLine, CartValidateRequest
from storefront.services.cart import check_product, validate_cart

router = APIRouter()

@router.post('/add', response_model=CartAddResponse)
def add_to_cart(payload: CartAddRequest, db: Session = Depends(get_db)):
    return check_product(db, payload.product_id, payload.quantity)

@router.post('/validate', response_model=List[CartLine])
def validate(payload: CartValidateRequest, db: Session = Depends(get_db)):
    return validate_cart(db, payload.items)
