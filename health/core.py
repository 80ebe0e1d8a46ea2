# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Infrastructure - Base classes for health checks
# PURPOSE: Health check plugin interface and result types
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Status Hierarchy (worst wins):
- healthy: All systems operational
- degraded: Operational with warnings
- unhealthy: Cannot serve resource trees

Categories (execution order by priority):
1. Startup (10): Process and configuration
2. Upstream (20): Orchestrator reachability
3. Application (40): Service internals (template cache, counters)
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @property
    def severity(self) -> int:
        return {
            HealthStatus.HEALTHY: 0,
            HealthStatus.DEGRADED: 1,
            HealthStatus.UNHEALTHY: 2,
        }[self]

    @classmethod
    def aggregate(cls, statuses: List["HealthStatus"]) -> "HealthStatus":
        """Aggregate multiple statuses (worst wins)."""
        if not statuses:
            return cls.HEALTHY
        return max(statuses, key=lambda s: s.severity)


class HealthCheckCategory(str, Enum):
    """Health check categories with default priorities."""
    STARTUP = "startup"
    UPSTREAM = "upstream"
    APPLICATION = "application"

    @property
    def default_priority(self) -> int:
        return {
            HealthCheckCategory.STARTUP: 10,
            HealthCheckCategory.UPSTREAM: 20,
            HealthCheckCategory.APPLICATION: 40,
        }[self]


@dataclass
class HealthCheckResult:
    """Result from a single health check."""
    status: HealthStatus
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def healthy(cls, message: str = None, **details) -> "HealthCheckResult":
        return cls(status=HealthStatus.HEALTHY, message=message, details=details)

    @classmethod
    def degraded(cls, message: str, **details) -> "HealthCheckResult":
        return cls(status=HealthStatus.DEGRADED, message=message, details=details)

    @classmethod
    def unhealthy(cls, message: str, **details) -> "HealthCheckResult":
        return cls(status=HealthStatus.UNHEALTHY, message=message, details=details)

    @classmethod
    def from_exception(cls, e: Exception) -> "HealthCheckResult":
        """Create unhealthy result from exception."""
        return cls(
            status=HealthStatus.UNHEALTHY,
            message=str(e),
            details={"exception_type": type(e).__name__},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result = {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        return result


@dataclass
class AggregatedHealthResult:
    """Aggregated result from multiple health checks."""
    status: HealthStatus
    checks: Dict[str, HealthCheckResult]
    total_duration_ms: float
    checked_at: datetime = field(default_factory=_utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "checks": {
                name: result.to_dict()
                for name, result in self.checks.items()
            },
            "total_duration_ms": round(self.total_duration_ms, 2),
            "checked_at": self.checked_at.isoformat(),
        }


class HealthCheckPlugin(ABC):
    """
    Base class for health check plugins.

    Attributes:
        name: Unique identifier for the check
        category: Check category (determines default priority)
        priority: Execution priority (lower runs first)
        timeout_seconds: Max execution time before timeout
        required_for_ready: If True, failure blocks /readyz

    Example:
        @register_check(category="upstream")
        class OrchestratorCheck(HealthCheckPlugin):
            name = "orchestrator"

            async def check(self) -> HealthCheckResult:
                ...
    """

    name: str = "unnamed"
    category: HealthCheckCategory = HealthCheckCategory.APPLICATION
    priority: int = 50
    timeout_seconds: float = 10.0
    required_for_ready: bool = True

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        """Execute health check."""

    def __init_subclass__(cls, **kwargs):
        """Set default priority from category if not specified."""
        super().__init_subclass__(**kwargs)
        if cls.priority == 50 and hasattr(cls, "category"):
            cls.priority = cls.category.default_priority


__all__ = [
    "HealthStatus",
    "HealthCheckCategory",
    "HealthCheckResult",
    "AggregatedHealthResult",
    "HealthCheckPlugin",
]
