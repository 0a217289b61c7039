"""Resource classification for discovered asset references.

A reference is skipped when any rule of its category matches the raw
reference string. Skipped references are neither fetched nor rewritten, so the
saved page keeps pointing at the original location.

Example:
    >>> classifier = ResourceClassifier.default()
    >>> classifier.should_skip("image", "clip.mp4")
    True
    >>> classifier.should_skip("script", "/static/app.js")
    False
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

IMAGE = "image"
STYLESHEET = "stylesheet"
SCRIPT = "script"


@dataclass(frozen=True)
class SkipRule:
    """A single skip pattern.

    Args:
        category: Asset category the rule applies to
        pattern: Case-insensitive regex searched in the raw reference
        reason: Short label used in log messages
    """

    category: str
    pattern: re.Pattern[str]
    reason: str

    @classmethod
    def build(cls, category: str, pattern: str, reason: str) -> SkipRule:
        return cls(category, re.compile(pattern, re.IGNORECASE), reason)

    def matches(self, raw_ref: str) -> bool:
        return self.pattern.search(raw_ref) is not None


_ANALYTICS = (r"analytics", r"tracking", r"gtag")

DEFAULT_RULES: tuple[SkipRule, ...] = (
    # Images: heavy media, font CDN, trackers, dynamic SVG, inline data
    SkipRule.build(IMAGE, r"\.mp4$", "video"),
    SkipRule.build(IMAGE, r"\.webm$", "video"),
    SkipRule.build(IMAGE, r"\.pdf$", "document"),
    SkipRule.build(IMAGE, r"\.zip$", "archive"),
    SkipRule.build(IMAGE, r"fonts\.googleapis\.com", "font cdn"),
    *(SkipRule.build(IMAGE, p, "tracker") for p in _ANALYTICS),
    SkipRule.build(IMAGE, r"\.svg\?", "dynamic svg"),
    SkipRule.build(IMAGE, r"data:image", "data url"),
    # Stylesheets
    SkipRule.build(STYLESHEET, r"fonts\.googleapis\.com", "font cdn"),
    *(SkipRule.build(STYLESHEET, p, "tracker") for p in _ANALYTICS),
    SkipRule.build(STYLESHEET, r"\.css\?v=\d+", "versioned css"),
    SkipRule.build(STYLESHEET, r"cdn\.jsdelivr\.net.*bootstrap", "css framework cdn"),
    # Scripts
    *(SkipRule.build(SCRIPT, p, "tracker") for p in (*_ANALYTICS, r"gtm")),
    SkipRule.build(SCRIPT, r"facebook\.net", "social"),
    SkipRule.build(SCRIPT, r"twitter\.com", "social"),
    SkipRule.build(SCRIPT, r"googleapis\.com.*analytics", "tracker"),
    SkipRule.build(SCRIPT, r"\.js\?v=\d+", "versioned js"),
    SkipRule.build(SCRIPT, r"recaptcha", "captcha"),
    SkipRule.build(SCRIPT, r"captcha", "captcha"),
    SkipRule.build(SCRIPT, r"ads", "ads"),
    SkipRule.build(SCRIPT, r"doubleclick", "ads"),
)


class ResourceClassifier:
    """Ordered skip-rule set evaluated per asset category."""

    def __init__(self, rules: Iterable[SkipRule]) -> None:
        self._rules: tuple[SkipRule, ...] = tuple(rules)

    @classmethod
    def default(
        cls, extra_patterns: Mapping[str, Iterable[str]] | None = None
    ) -> ResourceClassifier:
        """Build the built-in rule set, optionally extended per category.

        Args:
            extra_patterns: Additional regexes keyed by category, appended
                after the built-in rules

        Returns:
            ResourceClassifier with default and extra rules
        """
        rules = list(DEFAULT_RULES)
        for category, patterns in (extra_patterns or {}).items():
            rules.extend(SkipRule.build(category, p, "configured") for p in patterns)
        return cls(rules)

    @property
    def rules(self) -> tuple[SkipRule, ...]:
        return self._rules

    def matching_rule(self, category: str, raw_ref: str) -> SkipRule | None:
        """Return the first rule of ``category`` matching ``raw_ref``."""
        for rule in self._rules:
            if rule.category == category and rule.matches(raw_ref):
                return rule
        return None

    def should_skip(self, category: str, raw_ref: str) -> bool:
        return self.matching_rule(category, raw_ref) is not None
