"""BoardService: orchestrates fetching, mapping, and movement enrichment."""

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any

import pytz

from farol_app.analytics.metrics.aging import build_work_item
from farol_app.analytics.metrics.movement import reduce_events

from .config import ACTION_FETCH_MAX_WORKERS, ACTION_FETCH_MIN_PARALLEL
from .mappers import index_by_id, map_card
from .models import BoardSnapshot, WorkItem
from .settings import FarolSettings
from .trello_client import TrelloAPI

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int | None, int | None], None]


class BoardService:
    def __init__(self, api: TrelloAPI, settings: FarolSettings):
        self.api = api
        self.settings = settings
        self.classification = settings.classification()
        self._tz = pytz.timezone(settings.timezone)
        self._generation = itertools.count(1)

    # ------------------ Fetch Methods ------------------
    def fetch_snapshot(
        self,
        *,
        now: datetime | None = None,
        progress: ProgressCallback | None = None,
    ) -> BoardSnapshot:
        """Fetch every configured board and return one immutable snapshot.

        Each call clears the client cache so the dashboard always reflects the
        board as of this fetch. A board-level HTTP failure propagates as
        ``TrelloAPIError``; no partial snapshot is returned.
        """
        self.settings.validate()
        if hasattr(self.api, "clear_cache"):
            self.api.clear_cache()
        generation = next(self._generation)
        now = now or datetime.now(tz=self._tz)
        items: list[WorkItem] = []
        failed: list[str] = []
        for board_id in self.settings.board_ids:
            board_items, board_failed = self.fetch_board(board_id, now=now, progress=progress)
            items.extend(board_items)
            failed.extend(board_failed)
        logger.info("Fetched %s cards from %s board(s)", len(items), len(self.settings.board_ids))
        return BoardSnapshot(
            items=tuple(items),
            fetched_at=now,
            generation=generation,
            failed_cards=tuple(failed),
        )

    def fetch_board(
        self,
        board_id: str,
        *,
        now: datetime | None = None,
        progress: ProgressCallback | None = None,
    ) -> tuple[list[WorkItem], list[str]]:
        """Fetch one board and enrich its cards with movement metrics.

        Returns the work items and the ids of cards whose action history could
        not be loaded (those cards carry no movement data).
        """
        if progress:
            progress(f"Loading lists, cards and members of board {board_id}", None, None)
        lists = self.api.board_lists(board_id)
        cards = self.api.board_cards(board_id)
        members = self.api.board_members(board_id)
        list_by_id = index_by_id(lists, "name")
        member_by_id = index_by_id(members, "fullName")

        actions_by_card, failed = self._load_actions(cards, progress=progress)
        now = now or datetime.now(tz=self._tz)
        items = []
        for raw in cards or []:
            card = map_card(raw, list_by_id, member_by_id, actions_by_card.get(raw.get("id")))
            movement = reduce_events(card.events, self.classification)
            items.append(build_work_item(card, movement, now))
        return items, failed

    # ------------------ Internal Helpers ------------------
    def _load_actions(
        self,
        cards: Sequence[dict[str, Any]],
        *,
        progress: ProgressCallback | None = None,
    ) -> tuple[dict[str, list], list[str]]:
        """Fetch list-move actions for each card.

        A failing card is logged and skipped rather than failing the board.
        ``max_action_cards`` caps how many cards have their history requested.
        """
        work = [c.get("id") for c in cards or [] if isinstance(c, dict) and c.get("id")]
        cap = self.settings.max_action_cards
        if cap is not None and cap >= 0:
            work = work[:cap]
        results: dict[str, list] = {}
        failed: list[str] = []
        if not work:
            return results, failed

        label = "Loading card movement history"
        if progress:
            progress(label, 0, len(work))

        throttle = max(0, self.settings.throttle_ms) / 1000.0
        if throttle or len(work) < ACTION_FETCH_MIN_PARALLEL:
            for idx, card_id in enumerate(work, start=1):
                if idx > 1 and throttle:
                    time.sleep(throttle)
                actions = self._fetch_card_actions(card_id)
                if actions is None:
                    failed.append(card_id)
                else:
                    results[card_id] = actions
                if progress:
                    progress(label, idx, len(work))
            return results, failed

        completed = 0
        with ThreadPoolExecutor(max_workers=ACTION_FETCH_MAX_WORKERS) as pool:
            futures = {pool.submit(self._fetch_card_actions, cid): cid for cid in work}
            for fut in as_completed(futures):
                card_id = futures[fut]
                actions = fut.result()
                if actions is None:
                    failed.append(card_id)
                else:
                    results[card_id] = actions
                completed += 1
                if progress:
                    progress(label, completed, len(work))
        return results, failed

    def _fetch_card_actions(self, card_id: str) -> list | None:
        try:
            actions = self.api.card_move_actions(card_id)
        except Exception as exc:
            logger.warning("Ignoring actions of card %s: %s", card_id, exc)
            return None
        if not isinstance(actions, list):
            logger.warning("Unexpected actions payload for card %s: %r", card_id, type(actions))
            return None
        logger.debug("Loaded %s actions for card %s", len(actions), card_id)
        return actions
