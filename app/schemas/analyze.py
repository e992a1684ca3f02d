"""Pydantic v2 schemas for the analyze endpoint."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# Request Schemas
# -----------------------------------------------------------------------------


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    # Plain string: scheme and shape are validated by the extraction pipeline
    # so the caller gets the same typed error as every other failure.
    url: str = Field(..., description="URL of the post to analyze")


# -----------------------------------------------------------------------------
# Response Schemas
# -----------------------------------------------------------------------------


class HashtagBundleSchema(BaseModel):
    """Hashtags grouped by expected reach."""

    safe: list[str] = Field(default_factory=list, description="High-volume, broad tags")
    rising: list[str] = Field(default_factory=list, description="Trending, mid-volume tags")
    niche: list[str] = Field(
        default_factory=list, description="Specific, low-competition tags"
    )


class AnalyzeResponse(BaseModel):
    """Response for POST /api/analyze."""

    original_text: str = Field(..., description="Text extracted from the post")
    hashtags: HashtagBundleSchema
    platform: str = Field(..., description="Detected platform of the URL")
    extraction_method: str = Field(
        default="", description="How the text was obtained (oembed, playwright)"
    )
    hashtags_fallback: bool = Field(
        default=False,
        description="True when the AI provider failed and default tags were returned",
    )


class AnalyzeErrorResponse(BaseModel):
    """Error body returned when no text could be extracted."""

    detail: str = Field(..., description="User-facing, platform-aware message")
    code: str = Field(..., description="Outcome kind, e.g. NOT_FOUND")


class HealthResponse(BaseModel):
    """Response for the health endpoints."""

    status: str = "healthy"
    name: str
    version: str
    timestamp: datetime
