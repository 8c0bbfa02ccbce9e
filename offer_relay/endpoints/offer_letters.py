from __future__ import annotations

from typing import Any, Iterable

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from offer_relay import config
from offer_relay.schemas import (
    InternalErrorResponse,
    OfferLetterPayload,
    SubmissionResponse,
    ValidationErrorResponse,
    ValidationIssue,
)
from offer_relay.utils import relay
from offer_relay.utils.logging import get_logger

logger = get_logger("endpoints.offer_letters")

router = APIRouter(prefix="/api", tags=["offer-letters"])


def validation_issues(errors: Iterable[dict[str, Any]]) -> list[ValidationIssue]:
    """Convert pydantic error dicts into the public ``details`` list."""

    issues: list[ValidationIssue] = []
    for error in errors:
        loc = list(error.get("loc") or ())
        if loc and loc[0] == "body":
            loc = loc[1:]
        issues.append(
            ValidationIssue(
                path=loc,
                message=str(error.get("msg", "Invalid value")),
                code=str(error.get("type", "invalid")),
            )
        )
    return issues


def internal_error(exc: BaseException) -> JSONResponse:
    body = InternalErrorResponse(message=str(exc) or "Unknown error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(),
    )


@router.post(
    "/submit-offer-letter",
    response_model=SubmissionResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": InternalErrorResponse},
    },
)
async def submit_offer_letter(payload: OfferLetterPayload):
    """Accept an offer letter and hand it to the n8n workflow without waiting for it."""

    try:
        data = payload.to_webhook_json()
        webhook_url = config.get_webhook_url()

        if webhook_url is None:
            logger.info("Demo mode - payload would be sent: %s", data)
            return SubmissionResponse(message="Offer letter submitted successfully (demo mode)")

        relay.dispatch(webhook_url, data)
        logger.info(
            "Offer letter for %s relayed to %s",
            payload.candidate_email,
            webhook_url,
            extra={"position": payload.position},
        )
        return SubmissionResponse(
            message="Offer letter submitted successfully",
            note="Webhook triggered asynchronously",
        )
    except Exception as exc:
        logger.exception("Error submitting offer letter")
        return internal_error(exc)


__all__ = ["internal_error", "router", "validation_issues"]
