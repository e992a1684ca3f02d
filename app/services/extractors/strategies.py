"""Per-platform text-locating strategies over a rendered DOM snapshot.

Each strategy walks its platform's ordered :mod:`rules` table with
:func:`apply_rules`; the first rule whose matched text is longer than the
rule's threshold wins. Shorter matches are treated as page chrome and skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable

from bs4 import BeautifulSoup, NavigableString
from bs4.element import PreformattedString

from app.services.extractors.base import (
    ExtractionOutcome,
    MatchMode,
    Platform,
    RenderedDocument,
    SelectorRule,
)
from app.services.extractors.rules import (
    GENERIC_RULES,
    LINKEDIN_RULES,
    TWITTER_PROFILE_MARKER,
    TWITTER_RULES,
)

if TYPE_CHECKING:
    from bs4.element import Tag

logger = logging.getLogger(__name__)

# Never part of readable content.
NON_CONTENT_TAGS = ("script", "style", "noscript", "template")

# Elements whose boundaries separate words. Inline elements (a, span, b, ...)
# join their text to the neighbouring text as rendered.
BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
        "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
        "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
        "td", "th", "tr", "ul",
    }
)

_BOUNDARY = object()


def parse_html(html: str) -> BeautifulSoup:
    """Parse ``html`` and drop non-content elements."""
    soup = BeautifulSoup(html, "lxml")
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    return soup


def node_text(node: Tag) -> str:
    """Return the decoded text of ``node`` with whitespace collapsed.

    Text nodes are concatenated as written, so hashtags, mentions and links
    wrapped in inline elements stay attached to surrounding punctuation.
    A space is inserted only around block-level elements.
    """
    parts: list[str] = []
    stack: list = list(reversed(node.contents))
    while stack:
        item = stack.pop()
        if item is _BOUNDARY:
            parts.append(" ")
        elif isinstance(item, NavigableString):
            if not isinstance(item, PreformattedString):
                parts.append(str(item))
        else:
            if item.name in BLOCK_TAGS:
                parts.append(" ")
                stack.append(_BOUNDARY)
            stack.extend(reversed(item.contents))
    return " ".join("".join(parts).split())


def _narrow(node: Tag, inner: tuple[str, ...]) -> Tag | None:
    if not inner:
        return node
    for selector in inner:
        found = node.select_one(selector)
        if found is not None:
            return found
    return None


def _candidate_texts(soup: BeautifulSoup, rule: SelectorRule) -> Iterable[str]:
    nodes = soup.select(rule.pattern)
    if rule.mode is MatchMode.FIRST:
        nodes = nodes[:1]
    for node in nodes:
        target = _narrow(node, rule.inner)
        if target is not None:
            yield node_text(target)


def match_rule(soup: BeautifulSoup, rule: SelectorRule) -> str | None:
    """Evaluate a single rule against ``soup``.

    Returns the qualifying text, or None when nothing matched the pattern or
    every match was too short.
    """
    qualifying: list[str] = []
    for text in _candidate_texts(soup, rule):
        if len(text) > rule.min_length:
            if rule.mode is not MatchMode.ALL:
                return text
            qualifying.append(text)
        else:
            logger.debug(
                "Selector %r rejected: %d chars (minimum %d)",
                rule.pattern,
                len(text),
                rule.min_length + 1,
            )
    if qualifying:
        return " ".join(qualifying)
    return None


def apply_rules(soup: BeautifulSoup, rules: Iterable[SelectorRule]) -> str | None:
    """Return the text of the first qualifying rule in ``rules``."""
    for rule in rules:
        text = match_rule(soup, rule)
        if text:
            logger.info("Matched selector %r: %d chars", rule.pattern, len(text))
            return text
    return None


def extract_linkedin(soup: BeautifulSoup) -> ExtractionOutcome:
    text = apply_rules(soup, LINKEDIN_RULES)
    if text:
        return ExtractionOutcome.found(text, Platform.LINKEDIN)
    logger.warning("No LinkedIn selector produced qualifying text")
    return ExtractionOutcome.not_found(Platform.LINKEDIN, "No qualifying post text")


def extract_twitter(soup: BeautifulSoup) -> ExtractionOutcome:
    """Extract tweet text, distinguishing profile pages from missing text.

    The profile marker check runs first, so a profile timeline reports
    ``AMBIGUOUS_PROFILE_PAGE`` even when tweet-like nodes are present.
    """
    if soup.select_one(TWITTER_PROFILE_MARKER) is not None:
        logger.info("Twitter/X profile header found; not a single tweet")
        return ExtractionOutcome.ambiguous_profile(Platform.TWITTER_X)

    text = apply_rules(soup, TWITTER_RULES)
    if text:
        return ExtractionOutcome.found(text, Platform.TWITTER_X)
    logger.warning("Could not extract Twitter/X text from page")
    return ExtractionOutcome.not_found(Platform.TWITTER_X, "No qualifying tweet text")


def _title_and_description(soup: BeautifulSoup) -> str | None:
    parts: list[str] = []
    title = soup.find("title")
    if title is not None:
        title_text = node_text(title)
        if title_text:
            parts.append(title_text)
    meta = soup.find("meta", attrs={"name": "description"})
    if meta is not None:
        content = " ".join(str(meta.get("content") or "").split())
        if content:
            parts.append(content)
    return " ".join(parts) if parts else None


def extract_generic(soup: BeautifulSoup) -> ExtractionOutcome:
    """Extract page content, falling back to title plus meta description."""
    text = apply_rules(soup, GENERIC_RULES)
    if text:
        return ExtractionOutcome.found(text, Platform.GENERIC)

    logger.info("No content selector matched; using title and meta description")
    text = _title_and_description(soup)
    if text:
        return ExtractionOutcome.found(text, Platform.GENERIC)
    logger.warning("Generic page has no content, title or description")
    return ExtractionOutcome.not_found(Platform.GENERIC, "No readable content")


STRATEGIES: dict[Platform, Callable[[BeautifulSoup], ExtractionOutcome]] = {
    Platform.LINKEDIN: extract_linkedin,
    Platform.TWITTER_X: extract_twitter,
    Platform.GENERIC: extract_generic,
}


def extract_from_document(document: RenderedDocument) -> ExtractionOutcome:
    """Dispatch ``document`` to its platform's strategy."""
    soup = parse_html(document.html)
    return STRATEGIES[document.platform](soup)
