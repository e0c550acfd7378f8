"""
Immutable state snapshots and the store that publishes them.

The controller never mutates a snapshot; it builds a new one with
:func:`dataclasses.replace` and hands it to :meth:`StateStore.update`, which
notifies every subscriber when something actually changed.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .models import EntryDetail, EntrySummary

logger = logging.getLogger('pokedex.state')

Listener = Callable[['PokedexState'], None]


@dataclass(frozen=True)
class QuizRound:
    target: EntrySummary
    options: Tuple[str, ...]
    answered_correctly: bool = False
    answered_incorrectly: bool = False
    visible: bool = True


@dataclass(frozen=True)
class PokedexState:
    catalog: Tuple[EntrySummary, ...] = ()
    is_catalog_loading: bool = False
    catalog_error: Optional[str] = None
    selected_detail: Optional[EntryDetail] = None
    is_detail_loading: bool = False
    detail_error: Optional[str] = None
    quiz: Optional[QuizRound] = None


class StateStore:
    """Holds the current :class:`PokedexState` and notifies subscribers."""

    def __init__(self, initial: Optional[PokedexState] = None) -> None:
        self._state = initial or PokedexState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> PokedexState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> PokedexState:
        """Replace the snapshot with one carrying *changes* and publish it."""
        new_state = dataclasses.replace(self._state, **changes)
        if new_state == self._state:
            return self._state
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                # One broken view must not stop the others from rendering
                logger.exception("State listener %r failed", listener)
        return new_state

    def update_quiz(self, **changes) -> PokedexState:
        """Apply *changes* to the current quiz round, if there is one."""
        if self._state.quiz is None:
            return self._state
        return self.update(quiz=dataclasses.replace(self._state.quiz, **changes))
