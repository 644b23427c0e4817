from datetime import UTC, datetime, timedelta

import pytz

from farol_app.analytics.segments import filters as seg
from farol_app.core.mappers import items_to_dataframe
from farol_app.core.models import BoardSnapshot, MovementSummary, WorkItem
from farol_app.core.stages import StageClassification
from farol_app.features.board_overview import SNAPSHOT_STATE_KEY, build_context, publish_snapshot

NOW = datetime(2024, 9, 11, 15, 0, tzinfo=UTC)
TZ = pytz.timezone("America/Sao_Paulo")


def _classification():
    return StageClassification.from_mapping(
        {"backlog": ["Backlog"], "doing": ["Fazendo"], "waiting": ["Aguardando"], "done": ["Feito"]}
    )


def _items():
    return [
        WorkItem(
            id="c1",
            name="Write quarterly report",
            stage="Fazendo",
            due=None,
            last_activity=None,
            assignees=("Ana Souza",),
            aging_days=9,
        ),
        WorkItem(
            id="c2",
            name="Review budget",
            stage="Feito",
            due=None,
            last_activity=None,
            assignees=("Bia", "Caio"),
            movement=MovementSummary(
                first_entered_doing=NOW - timedelta(days=4),
                first_entered_done=NOW - timedelta(days=1),
                last_move_at=NOW - timedelta(days=1),
            ),
            lead_days=3,
            aging_days=1,
        ),
        WorkItem(
            id="c3",
            name="Call supplier",
            stage="Aguardando / fornecedor",
            due=None,
            last_activity=None,
            aging_days=2,
        ),
    ]


def _df():
    return items_to_dataframe(_items(), _classification())


def test_filter_by_name_and_assignee():
    df = _df()
    assert list(seg.by_name(df, "REPORT")["id"]) == ["c1"]
    assert list(seg.by_assignee(df, "caio")["id"]) == ["c2"]
    assert list(seg.by_assignee(df, "souza")["id"]) == ["c1"]


def test_filter_by_stage_and_category():
    df = _df()
    assert list(seg.by_stage(df, "aguardando")["id"]) == ["c3"]
    assert list(seg.by_category(df, "Done")["id"]) == ["c2"]
    # "Aguardando / fornecedor" is not a configured alias, so it is uncategorized
    assert list(seg.by_category(df, "Other")["id"]) == ["c3"]
    assert len(seg.by_category(df, "All")) == 3


def test_blank_filters_keep_everything():
    df = _df()
    assert len(seg.filter_items(df)) == 3
    assert len(seg.filter_items(df, query="  ", assignee="", stage=None, category=None)) == 3


def test_filters_on_empty_frame():
    df = items_to_dataframe([], _classification())
    assert seg.filter_items(df, query="x", category="Doing").empty


def test_build_context_filters_only_the_table():
    ctx = build_context(_items(), NOW, _classification(), 7, query="budget", tz=TZ)
    assert list(ctx.table["id"]) == ["c2"]
    assert len(ctx.items) == 3
    assert [it.id for it in ctx.metrics.aged_now] == ["c1"]
    assert [it.id for it in ctx.metrics.doing_now] == ["c1"]
    assert ctx.metrics.lead_average == 3
    assert ctx.metrics.bypass_rate == 0


def test_publish_snapshot_last_write_wins():
    state = {}
    older = BoardSnapshot(items=(), fetched_at=NOW, generation=1)
    newer = BoardSnapshot(items=tuple(_items()), fetched_at=NOW, generation=2)
    assert publish_snapshot(state, newer) is True
    assert publish_snapshot(state, older) is False
    assert state[SNAPSHOT_STATE_KEY] is newer
    again = BoardSnapshot(items=(), fetched_at=NOW, generation=3)
    assert publish_snapshot(state, again) is True
    assert state[SNAPSHOT_STATE_KEY] is again
