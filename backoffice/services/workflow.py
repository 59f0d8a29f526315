"""Per-kind status state machines.

All three kinds share one shape: an initial state, an optional review state
and terminal approved/rejected states. Only generic requests can be
cancelled. Transitions out of a terminal state are never allowed.
"""

from __future__ import annotations

from dataclasses import dataclass

from backoffice.exceptions import InvalidTransition
from backoffice.models.enums import DocumentStatus, GenericStatus, LeaveStatus, RequestKind


@dataclass(frozen=True)
class KindWorkflow:
    kind: RequestKind
    initial: str
    approved: str
    rejected: str
    review: str | None = None
    cancelled: str | None = None
    extra_terminal: frozenset[str] = frozenset()

    @property
    def open_states(self) -> frozenset[str]:
        """Statuses from which a reviewer may still act."""
        if self.review is None:
            return frozenset({self.initial})
        return frozenset({self.initial, self.review})

    @property
    def terminal_states(self) -> frozenset[str]:
        terminal = {self.approved, self.rejected, *self.extra_terminal}
        if self.cancelled is not None:
            terminal.add(self.cancelled)
        return frozenset(terminal)

    def is_terminal(self, status: str) -> bool:
        return status in self.terminal_states

    def can_transition(self, current: str, target: str) -> bool:
        if current not in self.open_states:
            return False
        if self.review is not None and target == self.review:
            return current == self.initial
        if self.cancelled is not None and target == self.cancelled:
            return True
        return target in (self.approved, self.rejected)

    def ensure_transition(self, current: str, target: str) -> None:
        """Raise InvalidTransition unless ``current -> target`` is allowed."""
        if not self.can_transition(current, target):
            raise InvalidTransition(f"Cannot move {self.kind.value} request from {current} to {target}")


WORKFLOWS: dict[RequestKind, KindWorkflow] = {
    RequestKind.LEAVE: KindWorkflow(
        kind=RequestKind.LEAVE,
        initial=LeaveStatus.PENDING.value,
        approved=LeaveStatus.APPROVED.value,
        rejected=LeaveStatus.REJECTED.value,
    ),
    RequestKind.DOCUMENT: KindWorkflow(
        kind=RequestKind.DOCUMENT,
        initial=DocumentStatus.PENDING.value,
        review=DocumentStatus.IN_PROGRESS.value,
        approved=DocumentStatus.COMPLETED.value,
        rejected=DocumentStatus.REJECTED.value,
    ),
    RequestKind.GENERIC: KindWorkflow(
        kind=RequestKind.GENERIC,
        initial=GenericStatus.PENDING.value,
        review=GenericStatus.IN_REVIEW.value,
        approved=GenericStatus.APPROVED.value,
        rejected=GenericStatus.REJECTED.value,
        cancelled=GenericStatus.CANCELLED.value,
        extra_terminal=frozenset({GenericStatus.COMPLETED.value}),
    ),
}


def workflow_for(kind: RequestKind) -> KindWorkflow:
    return WORKFLOWS[kind]
