from datetime import UTC, datetime, timedelta

from farol_app.analytics.metrics.aging import build_work_item, day_diff, round_half_up
from farol_app.analytics.metrics.movement import reduce_events, sort_events
from farol_app.core.models import CardModel, MovementSummary, StageEvent
from farol_app.core.stages import StageClassification

T0 = datetime(2024, 9, 2, 12, 0, tzinfo=UTC)


def _classification():
    return StageClassification.from_mapping(
        {
            "backlog": ["Backlog"],
            "doing": ["Fazendo"],
            "waiting": ["Aguardando"],
            "done": ["Feito", "Done"],
        }
    )


def _ev(day, before, after):
    return StageEvent(occurred_at=T0 + timedelta(days=day), stage_before=before, stage_after=after)


def test_bypass_straight_to_done():
    summary = reduce_events([_ev(0, "Backlog", "Done")], _classification())
    assert summary.first_entered_doing is None
    assert summary.first_entered_done == T0
    assert summary.bypass is True


def test_normal_flow_no_bypass():
    events = [_ev(0, "Backlog", "Fazendo"), _ev(2, "Fazendo", "Feito")]
    summary = reduce_events(events, _classification())
    assert summary.first_entered_doing == T0
    assert summary.first_entered_done == T0 + timedelta(days=2)
    assert summary.bypass is False
    assert summary.last_move_at == T0 + timedelta(days=2)
    assert summary.last_stage_after_move == "Feito"


def test_empty_input():
    summary = reduce_events([], _classification())
    assert summary == MovementSummary()
    assert summary.bypass is False
    card = CardModel(id="c1", name="x", stage="Backlog", due=None, last_activity=None, short_url=None)
    item = build_work_item(card, summary, T0)
    assert item.lead_days is None
    assert item.aging_days is None


def test_input_order_does_not_matter():
    events = [
        _ev(0, "Backlog", "Fazendo"),
        _ev(1, "Fazendo", "Aguardando"),
        _ev(3, "Aguardando", "Feito"),
        _ev(5, "Feito", "Fazendo"),
        _ev(6, "Fazendo", "Feito"),
    ]
    expected = reduce_events(events, _classification())
    shuffled = [events[3], events[0], events[4], events[2], events[1]]
    assert reduce_events(shuffled, _classification()) == expected
    assert reduce_events(list(reversed(events)), _classification()) == expected


def test_first_occurrence_is_kept():
    events = [
        _ev(0, "Backlog", "Fazendo"),
        _ev(1, "Fazendo", "Feito"),
        _ev(2, "Feito", "Fazendo"),
        _ev(4, "Fazendo", "Feito"),
    ]
    summary = reduce_events(events, _classification())
    assert summary.first_entered_doing == T0
    assert summary.first_entered_done == T0 + timedelta(days=1)
    assert summary.last_move_at == T0 + timedelta(days=4)


def test_done_from_doing_stage_is_not_bypass():
    # Doing entry happened before history was captured; the move into Done came from Doing.
    summary = reduce_events([_ev(0, "Fazendo", "Feito")], _classification())
    assert summary.first_entered_doing is None
    assert summary.bypass is False


def test_done_via_waiting_after_doing_is_not_bypass():
    events = [_ev(0, "Backlog", "Fazendo"), _ev(1, "Fazendo", "Aguardando"), _ev(2, "Aguardando", "Feito")]
    assert reduce_events(events, _classification()).bypass is False


def test_bypass_not_revisited_after_later_doing():
    events = [_ev(0, "Backlog", "Feito"), _ev(1, "Feito", "Fazendo"), _ev(2, "Fazendo", "Feito")]
    summary = reduce_events(events, _classification())
    assert summary.bypass is True
    assert summary.first_entered_doing == T0 + timedelta(days=1)
    assert summary.first_entered_done == T0


def test_events_missing_a_stage_are_ignored():
    events = [
        StageEvent(occurred_at=T0, stage_before=None, stage_after="Fazendo"),
        StageEvent(occurred_at=T0 + timedelta(days=1), stage_before="Backlog", stage_after=None),
        StageEvent(occurred_at=None, stage_before="Backlog", stage_after="Fazendo"),
    ]
    assert reduce_events(events, _classification()) == MovementSummary()


def test_stage_lookup_is_case_insensitive_and_trimmed():
    events = [_ev(0, " backlog ", "  FAZENDO"), _ev(1, "fazendo", "feito ")]
    summary = reduce_events(events, _classification())
    assert summary.first_entered_doing == T0
    assert summary.first_entered_done == T0 + timedelta(days=1)


def test_unknown_stages_are_movements_but_not_categories():
    summary = reduce_events([_ev(0, "Ideas", "Someday")], _classification())
    assert summary.last_move_at == T0
    assert summary.last_stage_after_move == "Someday"
    assert summary.first_entered_doing is None
    assert summary.first_entered_done is None


def test_sort_events_is_stable_for_ties():
    a = StageEvent(occurred_at=T0, stage_before="Backlog", stage_after="Fazendo")
    b = StageEvent(occurred_at=T0, stage_before="Fazendo", stage_after="Feito")
    assert sort_events([a, b]) == [a, b]
    assert sort_events([b, a]) == [b, a]
    assert reduce_events([b, a], _classification()).last_stage_after_move == "Fazendo"


def test_lead_and_aging_days():
    events = [_ev(0, "Backlog", "Fazendo"), _ev(3, "Fazendo", "Feito")]
    summary = reduce_events(events, _classification())
    card = CardModel(
        id="c1",
        name="Card",
        stage="Feito",
        due=None,
        last_activity=T0 + timedelta(days=20),
        short_url=None,
        assignees=["Ana", " Ana ", "Bia"],
    )
    item = build_work_item(card, summary, T0 + timedelta(days=10, hours=12))
    assert item.lead_days == 3
    # Last move wins over last activity as the aging reference.
    assert item.aging_days == 8
    assert item.assignees == ("Ana", "Bia")


def test_aging_falls_back_to_last_activity():
    card = CardModel(
        id="c1",
        name="Card",
        stage="Backlog",
        due=None,
        last_activity=T0,
        short_url=None,
    )
    item = build_work_item(card, MovementSummary(), T0 + timedelta(days=4))
    assert item.aging_days == 4


def test_rounding_matches_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(2.49) == 2
    assert day_diff(T0, T0 + timedelta(hours=36)) == 2
    assert day_diff(None, T0) is None


def test_mixed_naive_and_aware_timestamps_are_ordered():
    # Naive timestamps are taken as UTC when ordering a card's history.
    naive_done = datetime(2024, 9, 3, 12, 0)
    events = [
        StageEvent(occurred_at=naive_done, stage_before="Fazendo", stage_after="Feito"),
        StageEvent(occurred_at=T0, stage_before="Backlog", stage_after="Fazendo"),
    ]
    assert [ev.stage_after for ev in sort_events(events)] == ["Fazendo", "Feito"]
    summary = reduce_events(events, _classification())
    assert summary.first_entered_doing == T0
    assert summary.first_entered_done == naive_done
    assert summary.bypass is False
    card = CardModel(id="c1", name="Card", stage="Feito", due=None, last_activity=None, short_url=None)
    item = build_work_item(card, summary, T0 + timedelta(days=3))
    assert item.lead_days == 1
    assert item.aging_days == 2


def test_empty_stage_names_still_count_as_moves():
    summary = reduce_events([_ev(0, "", "Fazendo"), _ev(1, "Fazendo", "")], _classification())
    assert summary.first_entered_doing == T0
    assert summary.last_move_at == T0 + timedelta(days=1)
    assert summary.last_stage_after_move == ""
