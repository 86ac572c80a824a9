"""HTTP mapping for storefront errors."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from eshop.shared.errors import ErrorKind, StorefrontError

STATUS_FOR_ERROR = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.EMPTY_CART: 400,
    ErrorKind.INVALID_QUANTITY: 400,
    ErrorKind.INSUFFICIENT_STOCK: 400,
    ErrorKind.PRODUCT_NOT_FOUND: 404,
    ErrorKind.CART_NOT_FOUND: 404,
    ErrorKind.ITEM_NOT_FOUND: 404,
    ErrorKind.CONCURRENT_STOCK_CONFLICT: 409,
    ErrorKind.UNEXPECTED_ERROR: 500,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_FOR_ERROR.get(kind, 500)


def error_response(kind: ErrorKind, message: str, product_id: int | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(kind),
        content={"error": kind.value, "message": message, "product_id": product_id},
    )


async def _storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:  # noqa: ARG001
    return error_response(exc.kind, exc.message, exc.product_id)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: ARG001
    errors = exc.errors()
    if not errors:
        return error_response(ErrorKind.INVALID_INPUT, "Invalid request.")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return error_response(ErrorKind.INVALID_INPUT, message)


def register_error_handlers(app: FastAPI) -> None:
    """Install Protean's exception mappings plus the storefront error bodies.

    Protean covers its own exceptions (validation → 400, not found → 404,
    invalid state → 409, invalid operation → 422).
    """
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, _storefront_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
