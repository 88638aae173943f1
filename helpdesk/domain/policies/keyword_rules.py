"""RuleEngine — deterministic keyword-based ticket classification.

Used whenever the remote classifier is unavailable. Rules are plain data
evaluated first-match-wins, so precedence is the order of the tuples below.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.value_objects.enums import Category, Priority, Queue

FALLBACK_CONFIDENCE = 0.5
FALLBACK_REASONING = "Classified using keyword-based fallback system"


def _has_any_keyword(lowered_text: str, keywords: tuple[str, ...]) -> bool:
    """Return True if any keyword occurs anywhere in *lowered_text*.

    Plain substring test: "down" fires inside "shutdown", "fix" inside "hotfix".
    """
    return any(k in lowered_text for k in keywords)


# ── Rules ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CategoryRule:
    keywords: tuple[str, ...]
    category: Category
    queue: Queue

    def matches(self, lowered_text: str) -> bool:
        return _has_any_keyword(lowered_text, self.keywords)


@dataclass(frozen=True)
class PriorityRule:
    keywords: tuple[str, ...]
    priority: Priority
    queue_override: Queue | None = None

    def matches(self, lowered_text: str) -> bool:
        return _has_any_keyword(lowered_text, self.keywords)


CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        ("bug", "error", "crash", "fix"),
        Category.BUG_REPORT,
        Queue.TECHNICAL_SUPPORT,
    ),
    # Bare "request" is deliberately absent: "refund request" is billing.
    CategoryRule(
        ("feature", "suggest", "would like", "enhancement"),
        Category.FEATURE_REQUEST,
        Queue.GENERAL_SUPPORT,
    ),
    CategoryRule(
        ("payment", "invoice", "billing", "charge", "refund", "subscription"),
        Category.BILLING,
        Queue.BILLING_SUPPORT,
    ),
    CategoryRule(
        ("not working", "broken", "issue", "problem", "help"),
        Category.TECHNICAL,
        Queue.TECHNICAL_SUPPORT,
    ),
)

DEFAULT_CATEGORY = Category.GENERAL
DEFAULT_QUEUE = Queue.GENERAL_SUPPORT

PRIORITY_RULES: tuple[PriorityRule, ...] = (
    PriorityRule(
        ("urgent", "asap", "critical", "emergency", "down"),
        Priority.CRITICAL,
        queue_override=Queue.ESCALATION,
    ),
    PriorityRule(("important", "major", "serious"), Priority.HIGH),
    PriorityRule(("minor", "small", "when you have time"), Priority.LOW),
)

DEFAULT_PRIORITY = Priority.MEDIUM


# ── Engine ──────────────────────────────────────────────────────────


def detect_category(lowered_text: str) -> tuple[Category, Queue]:
    for rule in CATEGORY_RULES:
        if rule.matches(lowered_text):
            return rule.category, rule.queue
    return DEFAULT_CATEGORY, DEFAULT_QUEUE


def detect_priority(lowered_text: str) -> PriorityRule | None:
    """Return the first matching priority rule, or None for the default."""
    for rule in PRIORITY_RULES:
        if rule.matches(lowered_text):
            return rule
    return None


class RuleEngine:
    """Keyword classifier. Never raises; holds no state."""

    def classify(self, title: str, description: str) -> ClassificationResult:
        """Classify ticket text by literal keyword presence.

        Category and priority are independent passes over the same text.
        Only the critical priority rule may override the category's queue;
        the category itself is never overridden.

        Empty text falls through to general / general-support / medium.
        """
        text = f"{title or ''} {description or ''}".lower()

        category, queue = detect_category(text)

        priority = DEFAULT_PRIORITY
        priority_rule = detect_priority(text)
        if priority_rule is not None:
            priority = priority_rule.priority
            if priority_rule.queue_override is not None:
                queue = priority_rule.queue_override

        return ClassificationResult(
            suggested_priority=priority,
            suggested_category=category,
            suggested_queue=queue,
            confidence=FALLBACK_CONFIDENCE,
            reasoning=FALLBACK_REASONING,
            classified_at=datetime.now(timezone.utc),
        )
