from fastapi import APIRouter, Depends
from typing import List
from storefront.api.deps import get_order_service
from storefront.schemas import OrderCreate, OrderDetail, OrderHeader, OrderRead, OrderStatusUpdate
from storefront.services.orders import OrderService

router = APIRouter()

@router.post('', response_model=OrderRead, status_code=201)
def create_order(payload: OrderCreate, svc: OrderService = Depends(get_order_service)):
    return svc.create_order(payload)

# TODO: gate listing and status changes behind require_admin once the admin dashboard sends tokens
@router.get('', response_model=List[OrderDetail])
def list_orders(svc: OrderService = Depends(get_order_service)):
    return svc.list_orders()

@router.get('/{order_id}', response_model=OrderDetail)
def get_order(order_id: int, svc: OrderService = Depends(get_order_service)):
    return svc.get_order(order_id)

@router.put('/{order_id}/status', response_model=OrderHeader)
def update_status(order_id: int, payload: OrderStatusUpdate, svc: OrderService = Depends(get_order_service)):
    return svc.update_status(order_id, payload.status)
