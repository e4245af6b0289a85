"""Order placement and admin approval endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from worldcourse.auth.models import User
from worldcourse.auth.service import get_current_active_user, require_admin
from worldcourse.database import get_db
from worldcourse.models import OrderStatus
from worldcourse.schemas.order import OrderAccessStatus, OrderCreate, OrderDecision, OrderOut
from worldcourse.services.orders import OrderService, ensure_self_or_admin

router = APIRouter(prefix="/api", tags=["Orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    current_user: User = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service)
):
    order = service.create_order(current_user, data)
    return {
        "success": True,
        "message": "Order submitted and awaiting approval",
        "order": OrderOut.model_validate(order),
    }


@router.get("/orders/pending/{user_id}", response_model=OrderOut)
async def pending_order(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service)
):
    ensure_self_or_admin(current_user, user_id)
    return service.latest_pending(user_id)


@router.get("/orders/status/{user_id}", response_model=OrderAccessStatus)
async def order_status(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    service: OrderService = Depends(get_order_service)
):
    ensure_self_or_admin(current_user, user_id)
    return service.access_status(user_id)


@router.get("/admin/orders", response_model=list[OrderOut])
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    current_user: User = Depends(require_admin),
    service: OrderService = Depends(get_order_service)
):
    return service.list_orders(status_filter)


@router.post("/admin/approve-order")
async def approve_order(
    body: OrderDecision,
    current_user: User = Depends(require_admin),
    service: OrderService = Depends(get_order_service)
):
    """Approve a pending order and enroll the buyer in its courses."""
    order, created = service.approve(body.order_id, current_user)
    return {
        "success": True,
        "message": "Order approved and course access granted",
        "enrollments_created": created,
        "order": OrderOut.model_validate(order),
    }


@router.post("/admin/reject-order")
async def reject_order(
    body: OrderDecision,
    current_user: User = Depends(require_admin),
    service: OrderService = Depends(get_order_service)
):
    order = service.reject(body.order_id, current_user)
    return {"success": True, "message": "Order rejected", "order": OrderOut.model_validate(order)}
