"""HTTP mapping of ordering errors."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from ordering.errors import OrderingError
from ordering.results import OperationResult

ERROR_STATUS_CODES = {
    "empty_order": 400,
    "invalid_quantity": 400,
    "invalid_shipping_info": 400,
    "invalid_payment_method": 400,
    "invalid_request": 400,
    "access_denied": 403,
    "product_not_found": 404,
    "promotion_not_found": 404,
    "order_not_found": 404,
    "cart_item_not_found": 404,
    "insufficient_stock": 409,
    "order_not_cancellable": 409,
    "order_not_editable": 409,
    "invalid_status_transition": 409,
    "internal_error": 500,
}


def status_for(error: OrderingError) -> int:
    return ERROR_STATUS_CODES.get(error.code, 500)


def result_response(result: OperationResult, success_status: int = 200) -> JSONResponse:
    """Render an OperationResult as `{success, message, data | error}`."""
    status_code = success_status if result.success else status_for(result.error)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(result.to_dict()))


async def ordering_error_handler(request: Request, exc: OrderingError) -> JSONResponse:
    """Map OrderingError subclasses raised outside the services to HTTP responses."""
    return result_response(OperationResult.failure(exc))


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(OrderingError, ordering_error_handler)
