"""Body of GET /health."""

from typing import Literal

from pydantic import BaseModel, Field

DatabaseStatus = Literal["connected", "disconnected"]


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV the service runs with: dev, prod or test")
    database: DatabaseStatus | None = Field(
        default=None,
        description="Result of a SELECT 1 against the users database",
    )
