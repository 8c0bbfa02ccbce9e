"""Request and response models shared by the HTTP endpoints."""
from __future__ import annotations

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.networks import validate_email

EmploymentType = Literal["full-time", "part-time", "contract", "internship"]


class OfferLetterPayload(BaseModel):
    """Offer letter data submitted by the front end and forwarded to n8n as-is.

    Validators only accept or reject; values are kept exactly as sent.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    candidate_name: str = Field(..., alias="candidateName", min_length=1, description="Candidate full name")
    candidate_email: str = Field(..., alias="candidateEmail", description="Address the letter is sent to")
    position: str = Field(..., min_length=1, description="Job title offered")
    department: str = Field(..., min_length=1)
    start_date: str = Field(
        ...,
        alias="startDate",
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="First working day (YYYY-MM-DD)",
    )
    salary: str = Field(..., min_length=1, description="Compensation as written in the letter")
    employment_type: EmploymentType = Field(..., alias="employmentType")
    hiring_manager: str = Field(..., alias="hiringManager", min_length=1)
    company_name: str = Field(..., alias="companyName", min_length=1)
    additional_notes: str | None = Field(None, alias="additionalNotes")

    @field_validator("candidate_name", "position", "department", "salary", "hiring_manager", "company_name")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("candidate_email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        # email-validator checks the syntax; the normalised form is discarded.
        validate_email(value)
        return value

    @field_validator("start_date")
    @classmethod
    def _calendar_date(cls, value: str) -> str:
        try:
            dt.date.fromisoformat(value)
        except ValueError as exc:
            raise ValueError("must be a valid calendar date") from exc
        return value

    def to_webhook_json(self) -> dict[str, Any]:
        """Return the payload with its wire keys, omitting optional fields that were not sent."""

        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class SubmissionResponse(BaseModel):
    success: bool = True
    message: str
    note: str | None = None


class ValidationIssue(BaseModel):
    path: list[str | int]
    message: str
    code: str


class ValidationErrorResponse(BaseModel):
    error: str = "Invalid request data"
    details: list[ValidationIssue]


class InternalErrorResponse(BaseModel):
    error: str = "Internal server error"
    message: str


class HealthResponse(BaseModel):
    """Schema describing the payload returned by the health-check endpoint."""

    status: Literal["ok"] = Field("ok", description="Always 'ok' while the process serves requests.")
    timestamp: str = Field(..., description="Current server time, ISO-8601 in UTC.")


__all__ = [
    "EmploymentType",
    "HealthResponse",
    "InternalErrorResponse",
    "OfferLetterPayload",
    "SubmissionResponse",
    "ValidationErrorResponse",
    "ValidationIssue",
]
