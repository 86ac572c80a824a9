"""FastAPI routes for the storefront — carts, orders and stock alerts."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse

from eshop.api.auth import Principal, ensure_owner_or_admin, get_principal, require_admin
from eshop.api.errors import error_response
from eshop.api.schemas import (
    AddCartItemRequest,
    CartLineResponse,
    CartResponse,
    CountResponse,
    DecreaseCartItemRequest,
    OrderItemResponse,
    OrderPageResponse,
    OrderPlacedResponse,
    OrderResponse,
    PlaceOrderRequest,
    StatusResponse,
    StockAlertResponse,
)
from eshop.ordering.cart.service import CartResult
from eshop.ordering.cart.view import CartView
from eshop.ordering.order.queries import DEFAULT_PAGE_SIZE, OrderPage, OrderView
from eshop.storefront import Storefront, get_storefront


def current_storefront() -> Storefront:
    return get_storefront()


def _cart_response(view: CartView) -> CartResponse:
    return CartResponse(
        cart_id=view.cart_id,
        user_id=view.user_id,
        items=[
            CartLineResponse(
                product_id=line.product_id,
                product_name=line.product_name,
                price=line.price,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in view.items
        ],
        item_count=view.item_count,
        subtotal=view.subtotal,
    )


def _order_response(view: OrderView) -> OrderResponse:
    return OrderResponse(
        id=view.id,
        user_id=view.user_id,
        order_date=view.order_date,
        total_price=view.total_price,
        items=[
            OrderItemResponse(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in view.items
        ],
    )


def _page_response(result: OrderPage) -> OrderPageResponse:
    return OrderPageResponse(
        total_count=result.total_count,
        page=result.page,
        page_size=result.page_size,
        items=[_order_response(view) for view in result.items],
    )


def _status_or_error(result: CartResult) -> StatusResponse | JSONResponse:
    if not result.success:
        return error_response(result.error, result.message)
    return StatusResponse(message=result.message)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{user_id}", response_model=CartResponse)
def get_cart(
    user_id: str,
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
) -> CartResponse:
    ensure_owner_or_admin(principal, user_id)
    return _cart_response(storefront.carts.get_cart(user_id))


@cart_router.post("/{user_id}/items", response_model=StatusResponse)
def add_cart_item(
    user_id: str,
    body: AddCartItemRequest,
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
):
    ensure_owner_or_admin(principal, user_id)
    result = storefront.carts.add_item(user_id, body.product_id, body.quantity)
    return _status_or_error(result)


@cart_router.post("/{user_id}/items/{product_id}/decrease", response_model=StatusResponse)
def decrease_cart_item(
    user_id: str,
    product_id: int,
    body: DecreaseCartItemRequest,
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
):
    ensure_owner_or_admin(principal, user_id)
    result = storefront.carts.decrease_item(user_id, product_id, body.amount)
    return _status_or_error(result)


@cart_router.delete("/{user_id}/items", response_model=StatusResponse)
def clear_cart(
    user_id: str,
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
):
    ensure_owner_or_admin(principal, user_id)
    return _status_or_error(storefront.carts.clear_cart(user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
def place_order(
    body: PlaceOrderRequest,
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
):
    """Convert the user's cart into an order."""
    ensure_owner_or_admin(principal, body.user_id)
    result = storefront.checkout.create_order(body.user_id)
    if not result.success:
        return error_response(result.error, result.message, result.product_id)
    return OrderPlacedResponse(order_id=result.order_id, message=result.message)


@order_router.get("", response_model=OrderPageResponse, dependencies=[Depends(require_admin)])
def get_all_orders(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    storefront: Storefront = Depends(current_storefront),
) -> OrderPageResponse:
    """Every order in the store, newest first (administrators only)."""
    return _page_response(storefront.orders.get_all_orders(page=page, page_size=page_size))


@order_router.get("/user/{user_id}", response_model=OrderPageResponse)
def get_orders_by_user(
    user_id: str,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
) -> OrderPageResponse:
    ensure_owner_or_admin(principal, user_id)
    return _page_response(storefront.orders.get_orders_by_user(user_id, page=page, page_size=page_size))


@order_router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    principal: Principal = Depends(get_principal),
    storefront: Storefront = Depends(current_storefront),
) -> OrderResponse:
    view = storefront.orders.get_order(order_id)
    # Someone else's order is reported as missing rather than forbidden
    if view is None or not principal.can_act_as(view.user_id):
        raise HTTPException(status_code=404, detail="Order not found")
    return _order_response(view)


# ---------------------------------------------------------------------------
# Stock Alert Router
# ---------------------------------------------------------------------------
stock_alert_router = APIRouter(
    prefix="/stock-alerts",
    tags=["stock-alerts"],
    dependencies=[Depends(require_admin)],
)


@stock_alert_router.get("", response_model=list[StockAlertResponse])
def list_stock_alerts(storefront: Storefront = Depends(current_storefront)) -> list[StockAlertResponse]:
    return [StockAlertResponse(**vars(alert)) for alert in storefront.stock_alerts.list_alerts()]


@stock_alert_router.get("/unacknowledged/count", response_model=CountResponse)
def unacknowledged_count(storefront: Storefront = Depends(current_storefront)) -> CountResponse:
    return CountResponse(count=storefront.stock_alerts.unacknowledged_count())


@stock_alert_router.get("/{alert_id}", response_model=StockAlertResponse)
def get_stock_alert(alert_id: int, storefront: Storefront = Depends(current_storefront)) -> StockAlertResponse:
    alert = storefront.stock_alerts.get_alert(alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="Stock alert not found")
    return StockAlertResponse(**vars(alert))


@stock_alert_router.put("/{alert_id}/acknowledge", status_code=204)
def acknowledge_stock_alert(alert_id: int, storefront: Storefront = Depends(current_storefront)) -> Response:
    if not storefront.stock_alerts.acknowledge(alert_id):
        raise HTTPException(status_code=404, detail="Stock alert not found")
    return Response(status_code=204)


@stock_alert_router.delete("/{alert_id}", status_code=204)
def delete_stock_alert(alert_id: int, storefront: Storefront = Depends(current_storefront)) -> Response:
    if not storefront.stock_alerts.delete(alert_id):
        raise HTTPException(status_code=404, detail="Stock alert not found")
    return Response(status_code=204)
