"""OpenAI adapter — implements ClassifierPort using the OpenAI API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from helpdesk.application.ports.classifier_port import ClassifierPort, ClassifierUnavailable
from helpdesk.config import settings
from helpdesk.domain.entities.classification import ClassificationResult
from helpdesk.domain.value_objects.enums import Category, Priority, Queue

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are an expert support ticket classifier. Analyze the ticket and provide classification.

Your response must be a valid JSON object with these exact fields:
{
  "suggestedPriority": "low" | "medium" | "high" | "critical",
  "suggestedCategory": "technical" | "billing" | "general" | "feature-request" | "bug-report",
  "suggestedQueue": "technical-support" | "billing-support" | "general-support" | "escalation",
  "confidence": number between 0 and 1,
  "reasoning": "Brief explanation of classification"
}

Classification Guidelines:
- PRIORITY:
  - critical: System down, security issues, data loss, affecting many users
  - high: Major functionality broken, urgent business impact
  - medium: Standard issues, moderate impact
  - low: Minor issues, questions, nice-to-haves

- CATEGORY:
  - technical: Software bugs, errors, performance issues, integration problems
  - billing: Payment issues, invoices, subscriptions, refunds
  - general: Account questions, how-to queries, general inquiries
  - feature-request: New feature suggestions, improvements
  - bug-report: Specific bug reports with steps to reproduce

- QUEUE:
  - technical-support: Technical issues requiring developer assistance
  - billing-support: Financial and subscription queries
  - general-support: General inquiries and basic support
  - escalation: Critical issues requiring immediate senior attention

Return ONLY valid JSON, no markdown or extra text."""


class ClassificationPayload(BaseModel):
    """Wire shape of the model's reply. Every field required, no coercion."""

    model_config = ConfigDict(extra="ignore")

    suggested_priority: Priority = Field(alias="suggestedPriority")
    suggested_category: Category = Field(alias="suggestedCategory")
    suggested_queue: Queue = Field(alias="suggestedQueue")
    confidence: float = Field(ge=0.0, le=1.0, strict=True)
    reasoning: str = Field(min_length=1, strict=True)


def parse_classification(raw_text: str, classified_at: datetime) -> ClassificationResult:
    """Validate a raw JSON reply and build the domain result.

    Raises:
        ClassifierUnavailable: if the text is not JSON, a field is missing or
            mistyped, or a value is outside its enum/range.
    """
    try:
        payload = ClassificationPayload.model_validate_json(raw_text)
        return ClassificationResult(
            suggested_priority=payload.suggested_priority,
            suggested_category=payload.suggested_category,
            suggested_queue=payload.suggested_queue,
            confidence=payload.confidence,
            reasoning=payload.reasoning,
            classified_at=classified_at,
        )
    except ValidationError as e:
        raise ClassifierUnavailable(
            f"invalid classification reply ({e.error_count()} errors)"
        ) from e
    except ValueError as e:
        raise ClassifierUnavailable(f"invalid classification reply: {e}") from e


class OpenAIClassifier(ClassifierPort):
    """OpenAI implementation of ClassifierPort.

    Makes exactly one chat-completions call per classification. The SDK's
    built-in retries are disabled; the request is bounded by the configured
    timeout.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: AsyncOpenAI | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = None,
    ):
        api_key = api_key if api_key is not None else settings.openai_api_key
        self._model = model or settings.openai_model
        self._temperature = temperature if temperature is not None else settings.openai_temperature
        self._max_tokens = max_tokens or settings.openai_max_tokens

        if client is not None:
            self._client = client
        elif (api_key or "").strip():
            self._client = AsyncOpenAI(
                api_key=api_key,
                timeout=timeout or settings.openai_timeout_seconds,
                max_retries=0,
            )
        else:
            self._client = None

    @property
    def model(self) -> str:
        return self._model

    async def classify(self, title: str, description: str) -> ClassificationResult:
        """Send ticket text to OpenAI and parse the structured reply."""
        if self._client is None:
            raise ClassifierUnavailable("OPENAI_API_KEY is not set")

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self._build_user_prompt(title, description)},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise ClassifierUnavailable(f"OpenAI request failed: {e}") from e

        classified_at = datetime.now(timezone.utc)

        if not response.choices:
            raise ClassifierUnavailable("OpenAI returned no choices")
        raw_text = response.choices[0].message.content
        if not raw_text:
            raise ClassifierUnavailable("OpenAI returned an empty message")

        result = parse_classification(raw_text, classified_at)
        logger.debug(
            "OpenAI classified ticket: priority=%s, category=%s, queue=%s, confidence=%.2f",
            result.suggested_priority.value, result.suggested_category.value,
            result.suggested_queue.value, result.confidence,
        )
        return result

    @staticmethod
    def _build_user_prompt(title: str, description: str) -> str:
        return f"Title: {title}\n\nDescription: {description}"
