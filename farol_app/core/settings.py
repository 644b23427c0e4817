"""Runtime settings built from Streamlit secrets or a YAML file."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import (
    DEFAULT_AGING_DAYS,
    DEFAULT_MAX_ACTION_CARDS,
    DEFAULT_STAGE_ALIASES,
    DEFAULT_THROTTLE_MS,
    LEGACY_STAGE_KEYS,
    SETTINGS_FILE_NAME,
    TIMEZONE,
)
from .stages import StageClassification


class ConfigError(ValueError):
    """Raised when required settings (credentials, boards) are missing."""


def _first(data: Mapping[str, Any], *keys: str):
    for key in keys:
        value = data.get(key)
        if value not in (None, "", [], ()):
            return value
    return None


def _as_int(value, default: int | None) -> int | None:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True, slots=True)
class FarolSettings:
    api_key: str = ""
    token: str = ""
    board_ids: tuple[str, ...] = ()
    stage_aliases: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_STAGE_ALIASES))
    aging_days: int = DEFAULT_AGING_DAYS
    max_action_cards: int | None = DEFAULT_MAX_ACTION_CARDS
    throttle_ms: int = DEFAULT_THROTTLE_MS
    timezone: str = TIMEZONE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> FarolSettings:
        """Accept both ``KEY``/``TOKEN``/``BOARDS`` and legacy ``TRELLO_*`` names."""
        data = dict(data or {})
        boards = _first(data, "BOARDS", "TRELLO_BOARD_IDS", "boards") or ()
        if isinstance(boards, str):
            boards = [b.strip() for b in boards.split(",")]
        lists = _first(data, "LISTS", "lists") or DEFAULT_STAGE_ALIASES
        aliases = {}
        for k, v in dict(lists).items():
            key = str(k).strip().lower()
            aliases[LEGACY_STAGE_KEYS.get(key, key)] = tuple([v] if isinstance(v, str) else (v or ()))
        return cls(
            api_key=str(_first(data, "KEY", "TRELLO_KEY", "key") or ""),
            token=str(_first(data, "TOKEN", "TRELLO_TOKEN", "token") or ""),
            board_ids=tuple(str(b) for b in boards if b),
            stage_aliases=aliases,
            aging_days=_as_int(_first(data, "AGING_DAYS", "aging_days"), DEFAULT_AGING_DAYS),
            max_action_cards=_as_int(_first(data, "MAX_ACTION_CARDS", "max_action_cards"), DEFAULT_MAX_ACTION_CARDS),
            throttle_ms=_as_int(_first(data, "THROTTLE_MS", "throttle_ms"), DEFAULT_THROTTLE_MS),
            timezone=str(_first(data, "TIMEZONE", "timezone") or TIMEZONE),
        )

    def classification(self) -> StageClassification:
        return StageClassification.from_mapping(self.stage_aliases)

    def validate(self) -> None:
        missing = [
            name
            for name, value in (("KEY", self.api_key), ("TOKEN", self.token), ("BOARDS", self.board_ids))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing configuration: {', '.join(missing)}.")


def load_settings(path: str | Path | None = None) -> FarolSettings:
    """Read settings from ``farol.yaml`` (project root by default).

    A missing file yields default settings (no credentials), which fail
    ``validate``; a malformed file raises ``ConfigError``.
    """
    yaml_path = Path(path) if path else Path(__file__).resolve().parents[2] / SETTINGS_FILE_NAME
    if not yaml_path.exists():
        return FarolSettings()
    try:
        data = yaml.safe_load(yaml_path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid settings file {yaml_path}: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ConfigError(f"Settings file {yaml_path} must contain a mapping.")
    section = data.get("trello", data)
    return FarolSettings.from_mapping(section)
