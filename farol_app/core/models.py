"""Domain data models for board cards, stage movements, and dashboard metrics."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class StageEvent:
    occurred_at: datetime | None
    stage_before: str | None
    stage_after: str | None


@dataclass(frozen=True, slots=True)
class MovementSummary:
    first_entered_doing: datetime | None = None
    first_entered_done: datetime | None = None
    last_move_at: datetime | None = None
    last_stage_after_move: str | None = None
    bypass: bool = False


@dataclass(slots=True)
class CardModel:
    id: str
    name: str | None
    stage: str | None
    due: datetime | None
    last_activity: datetime | None
    short_url: str | None
    assignees: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    events: list[StageEvent] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class WorkItem:
    id: str
    name: str | None
    stage: str | None
    due: datetime | None
    last_activity: datetime | None
    short_url: str | None = None
    assignees: tuple[str, ...] = ()
    labels: tuple[str, ...] = ()
    movement: MovementSummary = field(default_factory=MovementSummary)

    # Derived metrics
    lead_days: int | None = None
    aging_days: int | None = None

    @property
    def first_entered_doing(self) -> datetime | None:
        return self.movement.first_entered_doing

    @property
    def first_entered_done(self) -> datetime | None:
        return self.movement.first_entered_done

    @property
    def last_move_at(self) -> datetime | None:
        return self.movement.last_move_at

    @property
    def bypass(self) -> bool:
        return self.movement.bypass

    @property
    def finished(self) -> bool:
        return self.movement.first_entered_done is not None


@dataclass(frozen=True, slots=True)
class DashboardMetrics:
    now: datetime
    week_start: datetime
    week_end: datetime
    aging_threshold_days: int
    done_today: tuple[WorkItem, ...] = ()
    done_this_week: tuple[WorkItem, ...] = ()
    doing_now: tuple[WorkItem, ...] = ()
    waiting_now: tuple[WorkItem, ...] = ()
    aged_now: tuple[WorkItem, ...] = ()
    bypass_rate: int = 0
    lead_average: int | None = None
    health_score: int = 100
    lead_by_assignee: tuple[tuple[str, int], ...] = ()
    top_aged: tuple[WorkItem, ...] = ()
    stage_counts: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    done_by_weekday: tuple[int, ...] = (0, 0, 0, 0, 0, 0, 0)


@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    items: tuple[WorkItem, ...]
    fetched_at: datetime
    generation: int = 0
    failed_cards: tuple[str, ...] = ()
