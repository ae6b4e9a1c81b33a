"""Error handling middleware and exception handlers."""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    DomainException,
    AgreementNotFoundException,
    AIServiceException,
    AIServiceTimeoutException,
    AuthenticationException,
    CustomerNotFoundException,
    DuplicatePaymentException,
    ForbiddenException,
    InsufficientFundsException,
    LoanNotFoundException,
    PaymentGatewayException,
    SubscriptionNotFoundException,
    WalletNotFoundException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(
    status_code: int,
    exc: DomainException,
    message: Optional[str] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": message or exc.message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(AuthenticationException)
    async def authentication_handler(
        request: Request,
        exc: AuthenticationException,
    ) -> JSONResponse:
        """Handle missing or invalid bearer tokens."""
        response = _error_response(401, exc)
        response.headers["WWW-Authenticate"] = "Bearer"
        return response

    @app.exception_handler(ForbiddenException)
    async def forbidden_handler(
        request: Request,
        exc: ForbiddenException,
    ) -> JSONResponse:
        """Handle access to another user's resources."""
        return _error_response(403, exc)

    @app.exception_handler(LoanNotFoundException)
    @app.exception_handler(AgreementNotFoundException)
    @app.exception_handler(SubscriptionNotFoundException)
    @app.exception_handler(WalletNotFoundException)
    @app.exception_handler(CustomerNotFoundException)
    async def not_found_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle not found errors."""
        return _error_response(404, exc)

    @app.exception_handler(InsufficientFundsException)
    async def insufficient_funds_handler(
        request: Request,
        exc: InsufficientFundsException,
    ) -> JSONResponse:
        """Handle wallet balances too low for the operation."""
        return _error_response(402, exc)

    @app.exception_handler(DuplicatePaymentException)
    async def duplicate_payment_handler(
        request: Request,
        exc: DuplicatePaymentException,
    ) -> JSONResponse:
        """Handle payments that were already credited."""
        return _error_response(409, exc)

    @app.exception_handler(AIServiceTimeoutException)
    async def ai_timeout_handler(
        request: Request,
        exc: AIServiceTimeoutException,
    ) -> JSONResponse:
        """Handle generative AI timeouts."""
        logger.error(
            "ai_service_timeout",
            request_id=get_request_id(),
        )
        return _error_response(
            503,
            exc,
            "Service temporarily unavailable. Please try again.",
        )

    @app.exception_handler(AIServiceException)
    async def ai_error_handler(
        request: Request,
        exc: AIServiceException,
    ) -> JSONResponse:
        """Handle generative AI errors."""
        logger.error(
            "ai_service_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(
            502,
            exc,
            "Unable to process request. Please try again later.",
        )

    @app.exception_handler(PaymentGatewayException)
    async def payment_gateway_handler(
        request: Request,
        exc: PaymentGatewayException,
    ) -> JSONResponse:
        """Handle Stripe errors."""
        logger.error(
            "payment_gateway_error",
            request_id=get_request_id(),
            message=exc.message,
            operation=exc.operation,
        )
        return _error_response(502, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle validation and business rule violations."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
