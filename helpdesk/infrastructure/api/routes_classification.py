"""Classification endpoint — classify free text without storing a ticket."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from helpdesk.application.use_cases.classify_ticket import ClassificationService
from helpdesk.domain.entities.ticket import TITLE_MAX_LENGTH
from helpdesk.infrastructure.api.dependencies import get_classification_service
from helpdesk.infrastructure.api.routes_tickets import serialize_classification

router = APIRouter(tags=["classification"])


class ClassifyRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=1)


@router.post("/classify")
async def classify(
    body: ClassifyRequest,
    service: ClassificationService = Depends(get_classification_service),
):
    """Suggest priority, category and queue for a ticket's text."""
    result = await service.classify(body.title, body.description)
    return serialize_classification(result)
