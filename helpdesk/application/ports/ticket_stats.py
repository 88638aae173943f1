"""Port interface for aggregate ticket statistics.

Implementations count in the store; no method may load whole tickets.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from helpdesk.domain.policies.dashboard_metrics import (
    AgentStats,
    DashboardMetrics,
    MetricsWindow,
    QueueStats,
)


class TicketStatsRepository(ABC):
    @abstractmethod
    async def dashboard(self, window: MetricsWindow) -> DashboardMetrics:
        ...

    @abstractmethod
    async def queues(self) -> list[QueueStats]:
        """Per-queue workload for every known queue, including "unassigned"."""
        ...

    @abstractmethod
    async def agents(self, month_start: datetime) -> list[AgentStats]:
        """Per-assignee workload, ordered by assignee; unassigned tickets are skipped."""
        ...
