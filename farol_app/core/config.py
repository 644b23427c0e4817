"""Central configuration, constants, and board fetch settings."""

from __future__ import annotations

from collections.abc import Sequence

# =============================================================================
# Board API Settings
# =============================================================================
TRELLO_API_BASE = "https://api.trello.com/1"
TIMEZONE = "America/Sao_Paulo"
REQUEST_TIMEOUT_SECONDS: float = 30.0
CACHE_TTL_SECONDS: float = 300.0

# Card fields requested from the board cards endpoint
CARD_FETCH_FIELDS: Sequence[str] = (
    "name",
    "idList",
    "due",
    "dateLastActivity",
    "labels",
    "idMembers",
    "shortUrl",
)
MEMBER_FETCH_FIELDS: Sequence[str] = ("fullName",)

# Only list moves are relevant for movement inference
ACTION_FILTER = "updateCard:idList"
ACTION_FETCH_LIMIT: int = 1000
MOVE_ACTION_TYPE = "updateCard"

# Parallel action fetch tuning
# Threads are used because action fetches are independent I/O bound HTTP calls.
ACTION_FETCH_MAX_WORKERS = 8
ACTION_FETCH_MIN_PARALLEL = 4  # below this, stay sequential to reduce overhead

# =============================================================================
# Workflow Stage Configuration
# =============================================================================
# Default list names per stage category (board lists are in Portuguese)
DEFAULT_STAGE_ALIASES: dict[str, tuple[str, ...]] = {
    "backlog": ("BACKLOG DO PRODUTO", "BACKLOG DA SPRINT"),
    "doing": ("FAZENDO",),
    "waiting": (
        "AGUARDANDO / EM ANDAMENTO",
        "AGUARDANDO EM ANDAMENTO DEPENDENTE DE TERCEIROS",
    ),
    "done": ("FEITO",),
}

# Legacy configuration keys used Portuguese category names
LEGACY_STAGE_KEYS: dict[str, str] = {
    "fazendo": "doing",
    "aguardando": "waiting",
    "feito": "done",
}

# =============================================================================
# Dashboard Default Values
# =============================================================================
DEFAULT_AGING_DAYS: int = 7  # "aged" when not moved for this many days
DEFAULT_TOP_AGED: int = 10  # Number of items in the top aged list
DEFAULT_TOP_ASSIGNEES: int = 8  # Number of people in the lead time chart
DEFAULT_MAX_ACTION_CARDS: int | None = None  # None fetches actions for every card
DEFAULT_THROTTLE_MS: int = 0  # Pause between sequential action fetches

WEEKDAY_LABELS: Sequence[str] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

# Columns shown in the items table, in display order
ITEM_TABLE_COLUMNS: Sequence[str] = (
    "name",
    "assignees",
    "stage",
    "first_doing",
    "first_done",
    "lead_days",
    "flow",
    "aging_days",
    "link",
)

SETTINGS_FILE_NAME = "farol.yaml"
