"""Data models for keepalive-prober."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class HTTPMethod(str, Enum):
    """HTTP methods used for probing."""
    
    HEAD = "HEAD"
    GET = "GET"


class Target(BaseModel):
    """One service to keep alive."""
    
    model_config = ConfigDict(frozen=True, extra="ignore")
    
    name: str = Field(..., min_length=1, description="Display label, unique per run")
    url: str = Field(..., description="Base origin, e.g. https://abc.example.co")
    endpoint: str | None = Field(
        default=None,
        description="Path resolved against url"
    )
    apikey: str | None = Field(
        default=None,
        repr=False,
        description="Credential sent as apikey and bearer token"
    )
    method: HTTPMethod | None = Field(
        default=None,
        description="Explicit HTTP method; derived from apikey when absent"
    )
    require_apikey: bool = Field(
        default=False,
        description="Fail without a network call when apikey is missing"
    )
    
    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value
    
    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"url must start with http:// or https://, got {value!r}")
        return value
    
    @field_validator("endpoint", "apikey", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value
    
    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value
    
    @property
    def is_authenticated(self) -> bool:
        """Whether probes for this target carry credentials."""
        return bool(self.apikey) or self.require_apikey
    
    @property
    def effective_method(self) -> HTTPMethod:
        """Explicit method if configured, else GET with credentials and HEAD without."""
        if self.method is not None:
            return HTTPMethod(self.method)
        return HTTPMethod.GET if self.apikey else HTTPMethod.HEAD
    
    def masked_apikey(self) -> str:
        """Return the apikey with everything but the edges masked."""
        if not self.apikey:
            return "-"
        if len(self.apikey) > 12:
            return self.apikey[:4] + "*" * (len(self.apikey) - 8) + self.apikey[-4:]
        return "*" * len(self.apikey)


class ProbeOutcome(BaseModel):
    """Result of probing one target."""
    
    model_config = ConfigDict(frozen=True)
    
    target: str
    success: bool
    url: str | None = None
    http_status: int | None = None
    error: str | None = None
    elapsed_ms: float | None = None


class RunSummary(BaseModel):
    """Aggregate over all outcomes of one run."""
    
    model_config = ConfigDict(frozen=True)
    
    outcomes: tuple[ProbeOutcome, ...] = ()
    
    @computed_field
    @property
    def total(self) -> int:
        return len(self.outcomes)
    
    @computed_field
    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.success)
    
    @computed_field
    @property
    def failed(self) -> int:
        return self.total - self.successful
    
    @property
    def failures(self) -> list[ProbeOutcome]:
        """Failing outcomes in configuration order."""
        return [o for o in self.outcomes if not o.success]
    
    @property
    def exit_code(self) -> int:
        """Process exit status: 0 only when every probe succeeded."""
        return 0 if self.failed == 0 else 1
    
    def to_dict(self) -> dict[str, Any]:
        """Serializable report of the run."""
        return {
            "summary": {
                "total": self.total,
                "successful": self.successful,
                "failed": self.failed,
            },
            "outcomes": [o.model_dump() for o in self.outcomes],
        }
