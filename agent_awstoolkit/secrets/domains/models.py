"""Domain models for secret retrieval."""
from dataclasses import dataclass
from typing import Any, Optional

from .errors import MissingArgument

DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class RetrievalRequest:
    """Request for fetching one secret from one region."""
    secret_id: str
    region: str = DEFAULT_REGION

    def __post_init__(self):
        if not self.secret_id:
            raise MissingArgument("Secret name is required")
        if not self.region:
            object.__setattr__(self, "region", DEFAULT_REGION)


@dataclass(frozen=True)
class RetrievalResult:
    """Outcome of a single GetSecretValue call."""
    succeeded: bool
    raw_value: Optional[str] = None
    error_detail: Optional[str] = None

    def __post_init__(self):
        if self.succeeded and (self.raw_value is None or self.error_detail is not None):
            raise ValueError("A successful result carries raw_value and no error_detail")
        if not self.succeeded and (self.error_detail is None or self.raw_value is not None):
            raise ValueError("A failed result carries error_detail and no raw_value")

    @classmethod
    def success(cls, raw_value: str) -> "RetrievalResult":
        return cls(succeeded=True, raw_value=raw_value)

    @classmethod
    def failure(cls, error_detail: str) -> "RetrievalResult":
        return cls(succeeded=False, error_detail=error_detail)


@dataclass(frozen=True)
class StructuredValue:
    """A payload that parsed as JSON. ``value`` may itself be None (JSON null)."""
    value: Any
