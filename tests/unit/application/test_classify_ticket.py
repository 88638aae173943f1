"""Tests for ClassificationService fallback behavior."""

import pytest

from helpdesk.application.ports.classifier_port import ClassifierPort, ClassifierUnavailable
from helpdesk.application.use_cases.classify_ticket import ClassificationService
from helpdesk.domain.policies.keyword_rules import FALLBACK_REASONING, RuleEngine
from helpdesk.domain.value_objects.enums import Category, Priority, Queue

# ─── Fakes ──────────────────────────────────────────────────────────


class FakeClassifier(ClassifierPort):
    def __init__(self, result=None, error: Exception | None = None):
        self._result = result
        self._error = error
        self.calls = 0

    async def classify(self, title, description):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._result


def _triple(r):
    return r.suggested_priority, r.suggested_category, r.suggested_queue


# ─── Happy path ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_remote_result_returned_unmodified(remote_result):
    service = ClassificationService(remote=FakeClassifier(result=remote_result))
    result = await service.classify("Cannot log in", "password rejected")
    assert result is remote_result


# ─── Fallback ───────────────────────────────────────────────────────


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ClassifierUnavailable("connection reset"),
        ClassifierUnavailable("invalid classification reply (1 errors)"),
        RuntimeError("unexpected"),
    ],
)
async def test_failure_falls_back_to_rules(error):
    remote = FakeClassifier(error=error)
    service = ClassificationService(remote=remote)

    result = await service.classify("System down", "production database is down, urgent")

    expected = RuleEngine().classify("System down", "production database is down, urgent")
    assert _triple(result) == _triple(expected)
    assert result.suggested_priority == Priority.CRITICAL
    assert result.suggested_queue == Queue.ESCALATION
    assert result.confidence == 0.5
    assert result.reasoning == FALLBACK_REASONING
    assert remote.calls == 1


@pytest.mark.asyncio
async def test_failure_is_logged(caplog):
    service = ClassificationService(remote=FakeClassifier(error=ClassifierUnavailable("quota")))
    await service.classify("Refund request", "I was charged twice, please refund")
    assert "keyword fallback" in caplog.text


@pytest.mark.asyncio
async def test_failures_are_not_cached(remote_result):
    remote = FakeClassifier(error=ClassifierUnavailable("timeout"))
    service = ClassificationService(remote=remote)
    await service.classify("a", "b")

    remote._error = None
    remote._result = remote_result
    assert await service.classify("a", "b") is remote_result
    assert remote.calls == 2


@pytest.mark.asyncio
async def test_without_remote_uses_rules():
    service = ClassificationService(remote=None)
    result = await service.classify("Love the product", "would like a dark mode feature")
    assert result.suggested_category == Category.FEATURE_REQUEST
    assert result.reasoning == FALLBACK_REASONING


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "title,description",
    [
        ("x", "y"),
        ("Help!!!", "?"),
        ("A" * 200, "lorem ipsum " * 500),
        ("Ünïcødé", "日本語のテキスト"),
    ],
)
async def test_always_returns_complete_result(title, description):
    service = ClassificationService(remote=FakeClassifier(error=ClassifierUnavailable("down")))
    r = await service.classify(title, description)
    assert r.suggested_priority in Priority
    assert r.suggested_category in Category
    assert r.suggested_queue in Queue
    assert 0.0 <= r.confidence <= 1.0
    assert r.reasoning
    assert r.classified_at is not None
