"""Authentication request and outcome models."""

from typing import Any, Dict, Literal, Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator


RuntimeConfig = Dict[str, Any]


class ChallengeRequest(BaseModel):
    """Request for a one-time code sent to an email address."""

    email: str
    display_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _check_email_syntax(cls, value: str) -> str:
        """Check syntax only. The caller's string is kept as given, and
        special-use domains such as `.test` or `localhost` are accepted."""
        try:
            validate_email(value, check_deliverability=False, globally_deliverable=False)
        except EmailNotValidError as exc:
            raise ValueError(str(exc)) from exc
        return value

    def to_payload(self) -> Dict[str, str]:
        """Build the request body. display_name is omitted unless it has a value."""
        payload = {"email": self.email}
        if self.display_name:
            payload["display_name"] = self.display_name
        return payload


class VerificationRequest(BaseModel):
    """Submission of a one-time code for verification."""

    email: str = Field(min_length=1)
    code: str = Field(min_length=1)

    def to_payload(self) -> Dict[str, str]:
        """Build the request body."""
        return {"email": self.email, "otp": self.code}


class RejectionBody(BaseModel):
    """Optional fields read from an error response body."""

    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    error_detail: Optional[str] = None
    error_type: Optional[str] = None
    reason: Optional[str] = None

    @field_validator("message", "error_detail", "error_type", "reason", mode="before")
    @classmethod
    def _text_or_none(cls, value: object) -> Optional[str]:
        """Keep strings with visible content only."""
        if isinstance(value, str) and value.strip():
            return value
        return None

    @classmethod
    def from_payload(cls, payload: Any) -> "RejectionBody":
        """Decode a parsed body; anything other than an object yields empty fields."""
        if not isinstance(payload, dict):
            return cls()
        return cls.model_validate(payload)


class _Success(BaseModel):
    """Base for success variants. payload is the parsed response body, unchanged."""

    success: Literal[True] = True
    payload: Any = None

    def to_dict(self) -> Any:
        return self.payload


class ChallengeIssued(_Success):
    """The endpoint issued a one-time code."""


class Verified(_Success):
    """The code was accepted and a session was established."""


class Terminated(_Success):
    """The session was terminated."""


class Rejected(BaseModel):
    """An operation did not succeed."""

    success: Literal[False] = False
    message: str = Field(min_length=1)
    reason: Optional[str] = None
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": False, "message": self.message}
        if self.reason is not None:
            data["reason"] = self.reason
        return data


ChallengeOutcome = Union[ChallengeIssued, Rejected]
VerificationOutcome = Union[Verified, Rejected]
LogoutOutcome = Union[Terminated, Rejected]
