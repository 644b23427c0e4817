"""Movement inference from a card's list-change history.

Reduces the raw stage events of one card to the first time it entered a
Doing stage, the first time it entered a Done stage, its last observed move,
and whether it reached Done without passing through Doing (a *bypass*).
"""

from __future__ import annotations

from collections.abc import Iterable

from farol_app.core.models import MovementSummary, StageEvent
from farol_app.core.stages import StageCategory, StageClassification

from .aging import as_utc


def sort_events(events: Iterable[StageEvent]) -> list[StageEvent]:
    """Return timestamped events in chronological order.

    Events without a timestamp cannot be placed and are dropped. ``sorted`` is
    stable, so events sharing a timestamp keep their original relative order.
    Naive timestamps are ordered as UTC.
    """
    dated = [ev for ev in events if ev is not None and ev.occurred_at is not None]
    return sorted(dated, key=lambda ev: as_utc(ev.occurred_at))


def reduce_events(
    events: Iterable[StageEvent],
    classification: StageClassification,
) -> MovementSummary:
    """Summarize one card's stage events.

    Parameters
    ----------
    events : iterable of StageEvent
        Raw events in any order. Events missing either stage name are not
        movements and are skipped.
    classification : StageClassification
        Alias sets used to recognise Doing and Done stages.

    Returns
    -------
    MovementSummary
        First-occurrence timestamps, last move, and the bypass flag. An input
        without any movement yields an empty summary with ``bypass=False``.

    Notes
    -----
    ``bypass`` is decided once, when the first Done entry is seen: it is set
    only if no Doing entry was observed before and the move into Done did not
    come from a Doing stage.
    """
    first_doing = None
    first_done = None
    last_move = None
    last_stage = None
    bypass = False

    for ev in sort_events(events):
        if ev.stage_before is None or ev.stage_after is None:
            continue
        when = ev.occurred_at
        last_move = when
        last_stage = ev.stage_after

        if first_doing is None and classification.matches(ev.stage_after, StageCategory.DOING):
            first_doing = when
        if first_done is None and classification.matches(ev.stage_after, StageCategory.DONE):
            first_done = when
            if first_doing is None and not classification.matches(ev.stage_before, StageCategory.DOING):
                bypass = True

    return MovementSummary(
        first_entered_doing=first_doing,
        first_entered_done=first_done,
        last_move_at=last_move,
        last_stage_after_move=last_stage,
        bypass=bypass,
    )
