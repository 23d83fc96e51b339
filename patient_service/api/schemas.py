from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )


class ErrorOut(BaseModel):
    """Body of every error response."""

    timestamp: datetime = Field(description="Server time the error was produced (UTC).")
    status: int = Field(description="HTTP status code.", examples=[409])
    error: str = Field(description="HTTP reason phrase.", examples=["Conflict"])
    message: str = Field(
        description="Human-readable summary.", examples=["Email address already exists"]
    )
    details: dict[str, str] | None = Field(
        default=None,
        description="Field name -> violation message. Present on validation failures only.",
        examples=[{"email": "Email should be valid"}],
    )
