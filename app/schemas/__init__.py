"""Pydantic schemas package."""

from app.schemas.analyze import (  # noqa: F401
    AnalyzeErrorResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    HashtagBundleSchema,
    HealthResponse,
)
