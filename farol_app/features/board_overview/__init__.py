"""Board overview feature module: metrics context and snapshot publication."""

from farol_app.features.board_overview.context import (
    SNAPSHOT_STATE_KEY,
    OverviewContext,
    build_context,
    publish_snapshot,
)

__all__ = [
    "SNAPSHOT_STATE_KEY",
    "OverviewContext",
    "build_context",
    "publish_snapshot",
]
