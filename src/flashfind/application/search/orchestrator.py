"""
Application Service: Search Orchestrator

Owns the search state (query, mode, loading flag, results) and dispatches each
search intent to the strategy its mode calls for:

    LOCAL        → local matcher
    IMAGE_PROBE  → local matcher over the applied suggestion
    SEMANTIC     → remote text search → reconciler
    VOICE        → voice results slot (or remote text search) → reconciler

State machine:
    IDLE ──query──▶ RESOLVING ──▶ RESOLVED
                         └──failure──▶ FAILED (results = local matcher output)
    any ──clear──▶ IDLE (results = full collection)

LOCAL, IMAGE_PROBE and VOICE re-resolve on every query change. SEMANTIC only
resolves on ``submit()`` so typing does not fire a remote call per keystroke.

Every dispatch captures a request token, and every query or mode change,
clear or reset invalidates it. Only the most recent token may commit; a
slower, older response is discarded when it finally arrives.

Usage:
    >>> orchestrator = SearchOrchestrator(store, gateway, board)
    >>> await orchestrator.set_mode(SearchMode.SEMANTIC)
    >>> await orchestrator.set_query("sunset on the beach")
    >>> state = await orchestrator.submit()
    >>> state.result_ids
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flashfind.application.timeline.grouping import group_by_day
from flashfind.domain.entities.search import (
    ResolutionOutcome,
    SearchMode,
    SearchPhase,
    SearchState,
)
from flashfind.shared.exceptions import APIError

from .gateway import RemoteOutcome
from .local_matcher import match_local
from .reconciler import KNOWN_PREFIXES, reconcile
from .voice import VoiceCapture

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from flashfind.application.collection.store import CollectionStore
    from flashfind.domain.entities.image import ImageEntity, MediaFile
    from flashfind.domain.entities.timeline import TimelineGroup

    from .channel import HandoffBoard
    from .gateway import RemoteSearchGateway, VoiceOutcome
    from .voice import AudioSource

logger = logging.getLogger(__name__)

# phase matching the results an outcome produced
_SETTLED_PHASE = {
    ResolutionOutcome.FULL_COLLECTION: SearchPhase.IDLE,
    ResolutionOutcome.LOCAL: SearchPhase.RESOLVED,
    ResolutionOutcome.REMOTE: SearchPhase.RESOLVED,
    ResolutionOutcome.EMPTY_RESULT: SearchPhase.RESOLVED,
    ResolutionOutcome.RECONCILIATION_MISS: SearchPhase.RESOLVED,
    ResolutionOutcome.DEGRADED: SearchPhase.FAILED,
}


@dataclass(frozen=True)
class Resolution:
    results: Sequence[ImageEntity]
    outcome: ResolutionOutcome
    failed: bool = False


class SearchOrchestrator:
    """Multi-modal search state machine over the collection store."""

    def __init__(
        self,
        store: CollectionStore,
        gateway: RemoteSearchGateway,
        board: HandoffBoard,
        *,
        search_timeout: float | None = None,
        prefixes: Iterable[str] = KNOWN_PREFIXES,
    ) -> None:
        self._store = store
        self._gateway = gateway
        self._board = board
        self._voice = VoiceCapture(gateway)
        self._timeout = search_timeout
        self._prefixes = tuple(prefixes)
        self._token = 0
        self._listeners: list[Callable[[SearchState], None]] = []
        self._state = SearchState(results=store.list())
        store.subscribe(self._on_collection_changed)

    @property
    def state(self) -> SearchState:
        return self._state

    def subscribe(self, listener: Callable[[SearchState], None]) -> None:
        """Register a callback invoked with every new state."""
        self._listeners.append(listener)

    def timeline(self) -> list[TimelineGroup]:
        """Current results grouped by upload day."""
        return group_by_day(self._state.results)

    # =========================================================================
    # Search intents
    # =========================================================================

    async def set_query(self, query: str) -> SearchState:
        """Change the query text; reactive modes resolve immediately."""
        self._supersede(query=query)
        if not query.strip():
            self._reset()
        elif self._state.mode.is_reactive:
            await self._dispatch()
        return self._state

    async def set_mode(self, mode: SearchMode) -> SearchState:
        """Switch modality. Reactive modes re-resolve a non-empty query."""
        if mode is self._state.mode:
            return self._state
        self._supersede(mode=mode)
        if self._state.query.strip() and mode.is_reactive:
            await self._dispatch()
        return self._state

    async def submit(self) -> SearchState:
        """Explicit search action; the only trigger for SEMANTIC mode."""
        if not self._state.query.strip():
            self._reset()
            return self._state
        return await self._dispatch()

    def clear(self) -> SearchState:
        self._commit(query="", suggestions=())
        self._reset()
        return self._state

    async def probe_image(self, image: MediaFile) -> tuple[str, ...]:
        """
        Ask the catalog to describe ``image``.

        The first suggestion replaces the query, unless the query or mode
        changed while the probe was running. Returns all suggestions (empty
        when the probe failed or found nothing).
        """
        token = self._supersede(mode=SearchMode.IMAGE_PROBE)
        outcome = await self._gateway.suggest_from_image(image, timeout=self._timeout)
        if not outcome.ok:
            logger.warning(f"Image probe failed: {outcome.error}")
        suggestions = tuple(outcome.values)
        if token != self._token:
            logger.debug("Image probe superseded, suggestions not applied")
            return suggestions
        self._commit(suggestions=suggestions)
        if suggestions:
            await self.set_query(suggestions[0])
        return suggestions

    async def capture_voice(self, source: AudioSource) -> VoiceOutcome:
        """
        Record a voice query and resolve it.

        Raises:
            CapturePermissionDenied: Microphone access was refused.
        """
        token = self._supersede(mode=SearchMode.VOICE)
        outcome = await self._voice.capture(source, timeout=self._timeout)
        if not outcome.ok:
            logger.warning(f"Voice search failed: {outcome.error}")
            return outcome
        if token != self._token:
            self._board.voice_results().take()
            logger.debug("Voice capture superseded, results dropped")
            return outcome
        self._commit(query=outcome.query or self._state.query)
        await self._dispatch()
        return outcome

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def _dispatch(self) -> SearchState:
        self._token += 1
        token = self._token
        mode, query = self._state.mode, self._state.query
        self._commit(phase=SearchPhase.RESOLVING, is_resolving=True)

        try:
            resolution = await self._resolve(mode, query)
        except APIError as e:
            logger.warning(f"{mode.value} search failed ({e}), using local matcher")
            resolution = Resolution(match_local(self._store.list(), query), ResolutionOutcome.DEGRADED, failed=True)

        if token != self._token:
            logger.debug(f"Discarding stale {mode.value} resolution #{token} (latest #{self._token})")
            return self._state

        self._commit(
            results=self._live(resolution.results),
            outcome=resolution.outcome,
            phase=SearchPhase.FAILED if resolution.failed else SearchPhase.RESOLVED,
            is_resolving=False,
        )
        return self._state

    async def _resolve(self, mode: SearchMode, query: str) -> Resolution:
        match mode:
            case SearchMode.LOCAL | SearchMode.IMAGE_PROBE:
                return Resolution(match_local(self._store.list(), query), ResolutionOutcome.LOCAL)
            case SearchMode.SEMANTIC:
                remote = await self._gateway.search_text(query, timeout=self._timeout)
                return self._reconcile(remote, query)
            case SearchMode.VOICE:
                identifiers = self._board.voice_results().take()
                if identifiers is None:
                    logger.info("No voice results waiting, falling back to text search")
                    remote = await self._gateway.search_text(query, timeout=self._timeout)
                else:
                    remote = RemoteOutcome(values=list(identifiers))
                return self._reconcile(remote, query)

    def _reconcile(self, remote: RemoteOutcome, query: str) -> Resolution:
        entities = self._store.list()
        if not remote.ok:
            logger.warning(f"Remote search failed ({remote.error}), using local matcher")
            return Resolution(match_local(entities, query), ResolutionOutcome.DEGRADED, failed=True)
        if not remote.values:
            return Resolution([], ResolutionOutcome.EMPTY_RESULT)

        matched = reconcile(entities, remote.values, self._prefixes)
        if not matched:
            logger.info(f"None of {len(remote.values)} remote ids matched locally, using local matcher")
            return Resolution(match_local(entities, query), ResolutionOutcome.RECONCILIATION_MISS)
        return Resolution(matched, ResolutionOutcome.REMOTE)

    # =========================================================================
    # State
    # =========================================================================

    def _supersede(self, **changes: object) -> int:
        """
        Record a new search intent (query and/or mode).

        In-flight resolutions may no longer commit; a pending one leaves the
        previous results in place. Returns the new request token.
        """
        self._token += 1
        if self._state.is_resolving:
            changes.update(is_resolving=False, phase=_SETTLED_PHASE[self._state.outcome])
        self._commit(**changes)
        return self._token

    def _reset(self) -> None:
        self._token += 1  # in-flight resolutions may no longer commit
        self._commit(
            results=self._store.list(),
            outcome=ResolutionOutcome.FULL_COLLECTION,
            phase=SearchPhase.IDLE,
            is_resolving=False,
        )

    def _live(self, results: Iterable[ImageEntity]) -> tuple[ImageEntity, ...]:
        """Drop entities no longer in the collection, refreshing the rest."""
        current = {entity.id: entity for entity in self._store.list()}
        return tuple(current[entity.id] for entity in results if entity.id in current)

    def _on_collection_changed(self) -> None:
        state = self._state
        if state.phase is SearchPhase.IDLE:
            self._commit(results=self._store.list())
        elif state.mode in (SearchMode.LOCAL, SearchMode.IMAGE_PROBE) and not state.is_resolving:
            self._commit(results=tuple(match_local(self._store.list(), state.query)))
        else:
            self._commit(results=self._live(state.results))

    def _commit(self, **changes: object) -> None:
        self._state = dataclasses.replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
