"""ClassificationService — remote classification with a guaranteed local fallback."""

from __future__ import annotations

import logging

from helpdesk.application.ports.classifier_port import ClassifierPort, ClassifierUnavailable
from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.policies.keyword_rules import RuleEngine

logger = logging.getLogger(__name__)


class ClassificationService:
    """Entry point for ticket classification used by intake and reclassification."""

    def __init__(self, remote: ClassifierPort | None, rules: RuleEngine | None = None):
        self._remote = remote
        self._rules = rules or RuleEngine()

    async def classify(self, title: str, description: str) -> ClassificationResult:
        """Classify ticket text. Never raises.

        At most one remote attempt. Any failure is logged and answered with
        the keyword engine's result; failures are not remembered between calls.
        """
        if self._remote is None:
            return self._rules.classify(title, description)

        try:
            return await self._remote.classify(title, description)
        except ClassifierUnavailable as e:
            logger.warning("Remote classifier unavailable, using keyword fallback: %s", e)
        except Exception:
            logger.exception("Unexpected error from remote classifier, using keyword fallback")

        return self._rules.classify(title, description)
