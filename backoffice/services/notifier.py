# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from backoffice.models.enums import RequestKind

logger = logging.getLogger(__name__)


class OperationOutcome(BaseModel):
    """Result of a lifecycle operation, reported for user feedback."""

    operation: str
    kind: RequestKind
    request_id: uuid.UUID | None = None
    actor_id: uuid.UUID | None = None
    success: bool
    status: str | None = None
    error: str | None = None
    message: str | None = None


@runtime_checkable
class Notifier(Protocol):
    """Interface for the notification/toast collaborator. Purely observational."""

    async def notify(self, outcome: OperationOutcome) -> None: ...


class LoggingNotifier:
    """Default notifier: writes outcomes to the application log."""

    async def notify(self, outcome: OperationOutcome) -> None:
        if outcome.success:
            logger.info(
                "%s %s %s succeeded (status=%s)", outcome.operation, outcome.kind, outcome.request_id, outcome.status
            )
        else:
            logger.info(
                "%s %s %s failed: %s %s",
                outcome.operation,
                outcome.kind,
                outcome.request_id,
                outcome.error,
                outcome.message,
            )


class InMemoryNotifier:
    """Collects outcomes in memory, for tests and local development."""

    def __init__(self) -> None:
        self.outcomes: list[OperationOutcome] = []

    async def notify(self, outcome: OperationOutcome) -> None:
        self.outcomes.append(outcome)


_notifier: Notifier = LoggingNotifier()


def get_notifier() -> Notifier:
    return _notifier


def set_notifier(notifier: Notifier) -> None:
    """Override the notifier (for testing or production wiring)."""
    global _notifier
    _notifier = notifier


async def publish(outcome: OperationOutcome) -> None:
    """Deliver an outcome. Notifier failures are logged and never propagate."""
    try:
        await _notifier.notify(outcome)
    except Exception:
        logger.exception("Notifier failed for %s %s", outcome.operation, outcome.request_id)
