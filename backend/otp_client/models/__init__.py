# Data models package

from .auth import (
    ChallengeIssued,
    ChallengeOutcome,
    ChallengeRequest,
    LogoutOutcome,
    Rejected,
    RejectionBody,
    RuntimeConfig,
    Terminated,
    VerificationOutcome,
    VerificationRequest,
    Verified,
)
from .config import ClientConfig

__all__ = [
    "ChallengeIssued",
    "ChallengeOutcome",
    "ChallengeRequest",
    "ClientConfig",
    "LogoutOutcome",
    "Rejected",
    "RejectionBody",
    "RuntimeConfig",
    "Terminated",
    "VerificationOutcome",
    "VerificationRequest",
    "Verified",
]
