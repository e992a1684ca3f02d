"""Static selector tables, ordered from most specific to broadest.

Rules are evaluated top to bottom and the first qualifying match wins, so a
broad class-name selector never shadows a precise structural one.
"""

from __future__ import annotations

from types import MappingProxyType

from app.services.extractors.base import MatchMode, Platform, SelectorRule

LINKEDIN_MIN_LENGTH = 50
TWEET_PRIMARY_MIN_LENGTH = 10
TWEET_FALLBACK_MIN_LENGTH = 20
GENERIC_MIN_LENGTH = 10

LINKEDIN_RULES: tuple[SelectorRule, ...] = (
    SelectorRule("article[data-id] .feed-shared-text__text", LINKEDIN_MIN_LENGTH),
    SelectorRule(".feed-shared-update-v2__description", LINKEDIN_MIN_LENGTH),
    SelectorRule(
        '[data-test-id="main-feed-activity-card"] .feed-shared-text',
        LINKEDIN_MIN_LENGTH,
    ),
    SelectorRule("article .break-words", LINKEDIN_MIN_LENGTH),
    SelectorRule(".feed-shared-text", LINKEDIN_MIN_LENGTH),
    # Any article with enough body text.
    SelectorRule("article", LINKEDIN_MIN_LENGTH, MatchMode.ANY),
)

# Present only on profile timelines, never on a single status page.
TWITTER_PROFILE_MARKER = 'div[data-testid="profileHeader"]'
TWEET_TEXT_SELECTOR = '[data-testid="tweetText"]'

TWITTER_RULES: tuple[SelectorRule, ...] = (
    SelectorRule(TWEET_TEXT_SELECTOR, TWEET_PRIMARY_MIN_LENGTH),
    SelectorRule(".tweet-text", TWEET_FALLBACK_MIN_LENGTH),
    SelectorRule('[data-test-id="tweet"]', TWEET_FALLBACK_MIN_LENGTH),
    SelectorRule(".css-1dbjc4n.r-1iusvr4.r-16y2uox.r-1kbdv8c", TWEET_FALLBACK_MIN_LENGTH),
    # Tweets always declare a language.
    SelectorRule('div[lang][dir="auto"]', TWEET_FALLBACK_MIN_LENGTH, MatchMode.ANY),
    SelectorRule(
        'article[data-testid="tweet"]',
        TWEET_PRIMARY_MIN_LENGTH,
        MatchMode.ANY,
        inner=(TWEET_TEXT_SELECTOR, "div[lang]"),
    ),
)

GENERIC_RULES: tuple[SelectorRule, ...] = (
    SelectorRule("main article", GENERIC_MIN_LENGTH, MatchMode.ALL),
    SelectorRule("article", GENERIC_MIN_LENGTH, MatchMode.ALL),
    SelectorRule('[class="content"]', GENERIC_MIN_LENGTH, MatchMode.ALL),
    SelectorRule('[class="post-content"]', GENERIC_MIN_LENGTH, MatchMode.ALL),
    SelectorRule('[class="entry-content"]', GENERIC_MIN_LENGTH, MatchMode.ALL),
    SelectorRule("main p", GENERIC_MIN_LENGTH, MatchMode.ALL),
    SelectorRule("body p", GENERIC_MIN_LENGTH, MatchMode.ALL),
)

SELECTOR_RULES = MappingProxyType(
    {
        Platform.LINKEDIN: LINKEDIN_RULES,
        Platform.TWITTER_X: TWITTER_RULES,
        Platform.GENERIC: GENERIC_RULES,
    }
)
