"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health envelope: same ``success`` flag as every other response, plus service details."""

    success: bool = True
    status: Literal["OK"] = "OK"
    message: str = "Server is running"
    environment: str = Field(description="APP_ENV the server was started with")
    database: Literal["connected", "disconnected"] = Field(
        description="Result of a SELECT 1 against the configured database",
    )
