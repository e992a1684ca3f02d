"""Post analysis REST endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.schemas.analyze import (
    AnalyzeErrorResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    HashtagBundleSchema,
)
from app.services.extractors import (
    ExtractionConfig,
    ExtractionOutcome,
    ExtractionPipeline,
    OutcomeKind,
    Platform,
)
from app.services.extractors.platform import is_single_post_url
from app.services.hashtag_engine import HashtagEngine

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analyze"])

LINKEDIN_NOT_FOUND = (
    "Could not extract text from LinkedIn. LinkedIn may require authentication. "
    "Please try with a public post or a different platform."
)
TWITTER_PROFILE = (
    "This appears to be a Twitter profile URL. Please provide a URL to a specific "
    "tweet. Click on the tweet and copy that URL instead."
)
TWITTER_NOT_FOUND = (
    "Could not extract text from this X/Tweet. "
    "Please ensure the tweet is public and accessible."
)
GENERIC_NOT_FOUND = (
    "Could not extract text from the provided URL. "
    "Please ensure it's a valid and accessible web page."
)
RENDER_FAILED = (
    "The page could not be loaded. It may be unavailable or blocking automated "
    "access. Please try again later."
)

_STATUS_CODES = {
    OutcomeKind.INVALID_URL: 400,
    OutcomeKind.NOT_FOUND: 400,
    OutcomeKind.AMBIGUOUS_PROFILE_PAGE: 400,
    OutcomeKind.RENDER_ERROR: 502,
}


def get_pipeline() -> ExtractionPipeline:
    """Dependency provider for the extraction pipeline."""
    return ExtractionPipeline(ExtractionConfig.from_settings(settings))


def get_hashtag_engine() -> HashtagEngine:
    """Dependency provider for the hashtag engine."""
    return HashtagEngine()


def outcome_message(outcome: ExtractionOutcome, url: str) -> str:
    """Map a failed outcome to a platform-aware, user-facing message."""
    if outcome.kind is OutcomeKind.INVALID_URL:
        return outcome.detail or "Invalid URL format"
    if outcome.kind is OutcomeKind.RENDER_ERROR:
        return RENDER_FAILED
    if outcome.kind is OutcomeKind.AMBIGUOUS_PROFILE_PAGE:
        return TWITTER_PROFILE

    if outcome.platform is Platform.LINKEDIN:
        return LINKEDIN_NOT_FOUND
    if outcome.platform is Platform.TWITTER_X:
        if not is_single_post_url(url, Platform.TWITTER_X):
            return TWITTER_PROFILE
        return TWITTER_NOT_FOUND
    return GENERIC_NOT_FOUND


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": AnalyzeErrorResponse}, 502: {"model": AnalyzeErrorResponse}},
)
async def analyze(
    request: AnalyzeRequest,
    pipeline: ExtractionPipeline = Depends(get_pipeline),
    engine: HashtagEngine = Depends(get_hashtag_engine),
):
    """Extract a post's text and generate categorized hashtags for it.

    Returns:
        AnalyzeResponse with the extracted text and hashtag bundle.
        Extraction failures return an AnalyzeErrorResponse with a
        platform-specific message (400, or 502 when the page failed to load).
    """
    outcome = await pipeline.extract(request.url)

    if not outcome.is_found:
        message = outcome_message(outcome, request.url)
        logger.warning(
            "Extraction failed for %s [%s]: %s", request.url, outcome.kind.value, outcome.detail
        )
        error = AnalyzeErrorResponse(detail=message, code=outcome.kind.name)
        return JSONResponse(
            status_code=_STATUS_CODES.get(outcome.kind, 400),
            content=error.model_dump(),
        )

    bundle = await engine.analyze(outcome.text)

    return AnalyzeResponse(
        original_text=outcome.text,
        hashtags=HashtagBundleSchema(
            safe=bundle.safe,
            rising=bundle.rising,
            niche=bundle.niche,
        ),
        platform=outcome.platform.value,
        extraction_method=outcome.method,
        hashtags_fallback=bundle.is_fallback,
    )
