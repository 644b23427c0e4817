"""Stage categories and alias-based classification of board list names.

A board's lists are free-form names. Each name is resolved against a
configured alias set per category (Backlog, Doing, Waiting, Done). Matching is
case-insensitive and ignores surrounding whitespace. Names that appear in no
alias set belong to no category.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .config import DEFAULT_STAGE_ALIASES, LEGACY_STAGE_KEYS


class StageCategory(str, Enum):
    BACKLOG = "Backlog"
    DOING = "Doing"
    WAITING = "Waiting"
    DONE = "Done"


OTHER_CATEGORY = "Other"


def normalize_stage_name(value) -> str:
    """Lowercase and trim a stage name; ``None`` becomes an empty string.

    Examples
    --------
    >>> normalize_stage_name("  Fazendo ")
    'fazendo'
    >>> normalize_stage_name(None)
    ''
    """
    if value is None:
        return ""
    return str(value).strip().lower()


def _alias_set(names: Iterable[str] | str | None) -> frozenset[str]:
    if names is None:
        return frozenset()
    if isinstance(names, str):
        names = [names]
    return frozenset(n for n in (normalize_stage_name(x) for x in names) if n)


def _category_for_key(key: str) -> StageCategory | None:
    text = normalize_stage_name(key)
    text = LEGACY_STAGE_KEYS.get(text, text)
    for category in StageCategory:
        if category.value.lower() == text:
            return category
    return None


@dataclass(frozen=True, slots=True)
class StageClassification:
    """Immutable alias sets keyed by stage category."""

    aliases: Mapping[StageCategory, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]] | None) -> StageClassification:
        """Build from a ``{"doing": [...], "done": [...]}`` style mapping.

        Keys are category names in any case; the legacy Portuguese keys
        (``fazendo``, ``aguardando``, ``feito``) are also accepted. Unknown keys
        are ignored.
        """
        aliases: dict[StageCategory, frozenset[str]] = {c: frozenset() for c in StageCategory}
        for key, names in (mapping or {}).items():
            category = _category_for_key(key)
            if category is None:
                continue
            aliases[category] = aliases[category] | _alias_set(names)
        return cls(aliases=aliases)

    @classmethod
    def default(cls) -> StageClassification:
        return cls.from_mapping(DEFAULT_STAGE_ALIASES)

    def matches(self, name, category: StageCategory) -> bool:
        """True if ``name`` is one of the aliases configured for ``category``."""
        key = normalize_stage_name(name)
        if not key:
            return False
        return key in self.aliases.get(category, frozenset())

    def classify(self, name) -> StageCategory | None:
        """Return the first category whose aliases contain ``name``."""
        for category in StageCategory:
            if self.matches(name, category):
                return category
        return None

    def category_label(self, name) -> str:
        category = self.classify(name)
        return category.value if category is not None else OTHER_CATEGORY
