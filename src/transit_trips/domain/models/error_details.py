"""Error details domain model."""

from pydantic import BaseModel, ConfigDict

from transit_trips.domain.errors import TransportFailure


class ErrorDetails(BaseModel):
    """Why a backend could not serve a query, attached to SERVICE_DOWN results."""

    model_config = ConfigDict(frozen=True)

    reason: str
    status_code: int | None = None
    url: str | None = None

    @classmethod
    def from_failure(cls, failure: TransportFailure) -> "ErrorDetails":
        return cls(reason=failure.reason, status_code=failure.status_code, url=failure.url)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code}: {self.reason}"
        return self.reason
