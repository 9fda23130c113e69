"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    DomainException,
    AssessmentNotFoundException,
    InvalidOfferActionException,
    InvalidOfferRequestException,
    OfferAlreadyOutstandingException,
    OfferExpiredException,
    OfferNotFoundException,
    OfferNotPendingException,
    VenueDataException,
    VenueDataTimeoutException,
    VenueIneligibleException,
    VenueNotFoundException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)

NOT_FOUND_EXCEPTIONS = (
    VenueNotFoundException,
    AssessmentNotFoundException,
    OfferNotFoundException,
)

CONFLICT_EXCEPTIONS = (
    VenueIneligibleException,
    OfferAlreadyOutstandingException,
    OfferNotPendingException,
    OfferExpiredException,
)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": code,
            "message": message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    async def not_found_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle missing venues, assessments and offers."""
        return _error_response(404, exc.code, exc.message)

    for exc_class in NOT_FOUND_EXCEPTIONS:
        app.add_exception_handler(exc_class, not_found_handler)

    async def conflict_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle requests that clash with the venue or offer state."""
        logger.info(
            "state_conflict",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(409, exc.code, exc.message)

    for exc_class in CONFLICT_EXCEPTIONS:
        app.add_exception_handler(exc_class, conflict_handler)

    @app.exception_handler(InvalidOfferRequestException)
    async def invalid_offer_request_handler(
        request: Request,
        exc: InvalidOfferRequestException,
    ) -> JSONResponse:
        """Handle offer terms that fail validation."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(InvalidOfferActionException)
    async def invalid_offer_action_handler(
        request: Request,
        exc: InvalidOfferActionException,
    ) -> JSONResponse:
        """Handle unknown offer actions."""
        return _error_response(400, exc.code, exc.message)

    @app.exception_handler(VenueDataTimeoutException)
    async def venue_timeout_handler(
        request: Request,
        exc: VenueDataTimeoutException,
    ) -> JSONResponse:
        """Handle payments platform timeouts."""
        logger.error(
            "venue_api_timeout",
            request_id=get_request_id(),
        )
        return _error_response(
            503,
            exc.code,
            "Service temporarily unavailable. Please try again.",
        )

    @app.exception_handler(VenueDataException)
    async def venue_data_error_handler(
        request: Request,
        exc: VenueDataException,
    ) -> JSONResponse:
        """Handle payments platform errors."""
        logger.error(
            "venue_api_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(
            503,
            exc.code,
            "Unable to fetch venue data. Please try again later.",
        )

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc.code, exc.message)

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
        return _error_response(500, "INTERNAL_ERROR", "An unexpected error occurred.")
