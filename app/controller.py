"""
Application state controller.

Mediates between user intents coming from a view and the blocking
:class:`~pokeapi_client.PokeAPIClient`.  Everything here runs on one asyncio
event loop; network calls are pushed to a small thread pool and awaited, so
the loop (and whatever renders the state) never blocks.

Intents are plain methods.  Those that touch the network return the
:class:`asyncio.Task` doing the work so callers can await it if they want
to, but nothing requires them to.
"""
from __future__ import annotations

import asyncio
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional, Set

from pokeapi_client import PokeAPIClient, PokeAPIError

from .config import DEFAULT_CONFIG
from .models import EntrySummary
from .services.quiz_service import QuizService
from .state import Listener, PokedexState, StateStore

logger = logging.getLogger('pokedex.controller')


class PokedexController:
    """Owns the observable :class:`PokedexState` and the quiz timer.

    Args:
        client:       API client used for catalog and detail requests.
        config:       Config dict (see :mod:`app.config`); defaults are used
                      for missing keys.
        rng:          Random source for quiz rounds (seed it in tests).
        store:        Optional pre-built :class:`StateStore`.
        autostart:    Start the catalog fetch immediately.  Requires a
                      running event loop.
    """

    def __init__(self, client: PokeAPIClient, config: Optional[Dict[str, Any]] = None,
                 rng: Optional[random.Random] = None, store: Optional[StateStore] = None,
                 autostart: bool = True) -> None:
        cfg = dict(DEFAULT_CONFIG)
        cfg.update(config or {})
        self._client = client
        self._catalog_limit = int(cfg['catalog_limit'])
        self._incorrect_seconds = float(cfg['incorrect_answer_seconds'])
        self._quiz = QuizService(rng)
        self._store = store or StateStore()
        self._executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='pokedex_api')
        self._tasks: Set[asyncio.Task] = set()
        self._catalog_task: Optional[asyncio.Task] = None
        self._catalog_loaded = False
        self._incorrect_clear_task: Optional[asyncio.Task] = None

        if autostart:
            self.start()

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> PokedexState:
        return self._store.state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._store.subscribe(listener)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _call_client(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def start(self) -> Optional[asyncio.Task]:
        """Fetch the catalog unless it is already loaded or loading."""
        if self._catalog_loaded:
            return None
        if self._catalog_task is not None and not self._catalog_task.done():
            return self._catalog_task
        # Raises RuntimeError outside a running loop, before any state changes
        asyncio.get_running_loop()
        self._store.update(is_catalog_loading=True, catalog_error=None)
        self._catalog_task = self._spawn(self._fetch_catalog())
        return self._catalog_task

    def retry_catalog(self) -> Optional[asyncio.Task]:
        """Re-issue the catalog fetch after a failure."""
        if self.state.catalog or self.state.is_catalog_loading:
            return None
        logger.info("Retrying catalog fetch")
        return self.start()

    async def _fetch_catalog(self) -> None:
        try:
            entries = await self._call_client(self._client.get_entry_list, self._catalog_limit)
        except PokeAPIError as e:
            logger.error("Catalog fetch failed: %s", e)
            self._store.update(is_catalog_loading=False, catalog_error=str(e))
            return
        self._catalog_loaded = True
        self._store.update(catalog=tuple(entries), is_catalog_loading=False, catalog_error=None)

    # ------------------------------------------------------------------
    # Detail
    # ------------------------------------------------------------------

    def select_entry(self, entry: EntrySummary) -> asyncio.Task:
        """Load and show the detail for *entry*.

        Overlapping selections are not cancelled; whichever response
        arrives last ends up in ``selected_detail``.
        """
        self._store.update(is_detail_loading=True, detail_error=None)
        return self._spawn(self._fetch_detail(entry.name))

    async def _fetch_detail(self, name: str) -> None:
        try:
            detail = await self._call_client(self._client.get_entry_detail, name)
        except PokeAPIError as e:
            logger.error("Detail fetch for %s failed: %s", name, e)
            self._store.update(is_detail_loading=False, detail_error=str(e))
            return
        self._store.update(selected_detail=detail, is_detail_loading=False)

    def dismiss_detail(self) -> None:
        self._store.update(selected_detail=None, detail_error=None)

    # ------------------------------------------------------------------
    # Quiz
    # ------------------------------------------------------------------

    def start_quiz(self) -> None:
        """Begin a new round; does nothing while the catalog is empty."""
        round_ = self._quiz.new_round(self.state.catalog)
        if round_ is None:
            logger.debug("Quiz requested with an empty catalog")
            return
        self._cancel_incorrect_clear()
        self._store.update(quiz=round_)

    def next_quiz(self) -> None:
        self.start_quiz()

    def close_quiz(self) -> None:
        """Hide the quiz; the current target and options are kept."""
        self._cancel_incorrect_clear()
        self._store.update_quiz(visible=False, answered_incorrectly=False)

    def check_answer(self, answer: str) -> None:
        round_ = self.state.quiz
        if round_ is None or not round_.visible:
            logger.debug("Answer %r ignored: no quiz shown", answer)
            return
        if round_.answered_correctly:
            logger.debug("Answer %r ignored: round already solved", answer)
            return

        if self._quiz.is_correct(round_, answer):
            self._cancel_incorrect_clear()
            self._store.update_quiz(answered_correctly=True, answered_incorrectly=False)
            return

        self._store.update_quiz(answered_incorrectly=True)
        # A new wrong guess restarts the window rather than stacking timers
        self._cancel_incorrect_clear()
        self._incorrect_clear_task = self._spawn(self._clear_incorrect_after(self._incorrect_seconds))

    async def _clear_incorrect_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        if self._incorrect_clear_task is asyncio.current_task():
            self._incorrect_clear_task = None
        self._store.update_quiz(answered_incorrectly=False)

    def _cancel_incorrect_clear(self) -> None:
        if self._incorrect_clear_task is not None:
            self._incorrect_clear_task.cancel()
            self._incorrect_clear_task = None

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Cancel pending work and release the worker threads."""
        self._cancel_incorrect_clear()
        pending = [t for t in self._tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._executor.shutdown(wait=False)
