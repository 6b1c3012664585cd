from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from admin_query.core.config import settings

_LOG = logging.getLogger("admin_query.selection")


class SelectionPolicy(str, Enum):
    CLEAR = "clear"
    KEEP = "keep"
    RETAIN_VISIBLE = "retain_visible"


class SelectionState(str, Enum):
    EMPTY = "empty"
    PARTIAL = "partial"
    ALL = "all"


class SelectionController:
    """Row selection of one table, derived against the currently visible IDs.

    ``set_visible_ids`` reseeds the selection according to ``policy``:
    ``clear`` drops everything on every page turn, ``keep`` carries
    off-page selections along and ``retain_visible`` keeps only IDs that are
    still visible.
    """

    def __init__(self, visible_ids: Iterable[str] = (), policy: SelectionPolicy | str | None = None):
        self.policy = SelectionPolicy(policy or settings.SELECTION_POLICY)
        self._visible: list[str] = list(visible_ids)
        # dict keeps insertion order for stable bulk-action payloads
        self._selected: dict[str, None] = {}

    @property
    def visible_ids(self) -> list[str]:
        return list(self._visible)

    @property
    def selected(self) -> list[str]:
        return list(self._selected)

    def is_selected(self, record_id: str) -> bool:
        return record_id in self._selected

    def select_one(self, record_id: str) -> None:
        self._selected[record_id] = None

    def deselect_one(self, record_id: str) -> None:
        self._selected.pop(record_id, None)

    def select_all(self) -> None:
        self._selected = dict.fromkeys(self._visible)

    def deselect_all(self) -> None:
        self._selected = {}

    def set_visible_ids(self, visible_ids: Iterable[str]) -> None:
        self._visible = list(visible_ids)
        if self.policy is SelectionPolicy.CLEAR:
            self._selected = {}
        elif self.policy is SelectionPolicy.RETAIN_VISIBLE:
            visible = set(self._visible)
            self._selected = {key: None for key in self._selected if key in visible}
        _LOG.debug(
            "Reseeded selection policy=%s visible=%s selected=%s",
            self.policy.value,
            len(self._visible),
            len(self._selected),
        )

    @property
    def all_selected(self) -> bool:
        return len(self._visible) > 0 and len(self._selected) == len(self._visible)

    @property
    def some_selected(self) -> bool:
        return 0 < len(self._selected) < len(self._visible)

    @property
    def state(self) -> SelectionState:
        if not self._selected:
            return SelectionState.EMPTY
        if self.all_selected:
            return SelectionState.ALL
        return SelectionState.PARTIAL
