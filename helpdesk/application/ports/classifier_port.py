"""Port interface for remote ticket classification."""

from abc import ABC, abstractmethod

from helpdesk.domain.entities.classification import ClassificationResult


class ClassifierUnavailable(RuntimeError):
    """The remote classifier could not be reached or returned an unusable reply."""


class ClassifierPort(ABC):
    @abstractmethod
    async def classify(self, title: str, description: str) -> ClassificationResult:
        """Classify ticket text and return a fully populated result.

        Raises:
            ClassifierUnavailable: on any transport, auth, quota or
                response-validation failure. Implementations never retry
                and never return partial results.
        """
        ...
