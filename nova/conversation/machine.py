"""Client-side conversation state machine.

Owns the ordered entry list, the turn lifecycle and the selected-services
context that rides along with the next outgoing turn. All mutation goes
through `submit`; the state check and the move to SENDING happen before the
first await, so a second submission while a turn is in flight is a no-op.
"""

import asyncio
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Protocol,
    Sequence,
    Set,
    Tuple,
)

from nova.conversation.models import ConversationEntry, TurnState
from nova.conversation.steps import entries_from_steps
from nova.exceptions import InvalidTurnStateError
from nova.identity import IdentityManager
from nova.logger import Logger, session_logger
from nova.upstream.models import UpstreamStep

EntryListener = Callable[[ConversationEntry], None]

_TRANSITIONS: Dict[TurnState, FrozenSet[TurnState]] = {
    TurnState.IDLE: frozenset({TurnState.SENDING}),
    TurnState.SETTLED: frozenset({TurnState.SENDING}),
    TurnState.FAILED: frozenset({TurnState.SENDING}),
    TurnState.SENDING: frozenset({TurnState.AWAITING_UPSTREAM, TurnState.FAILED}),
    TurnState.AWAITING_UPSTREAM: frozenset({TurnState.SETTLED, TurnState.FAILED}),
}


class ConversationTransport(Protocol):
    async def bootstrap(self, correlation_id: str) -> List[UpstreamStep]: ...

    async def send_message(
        self, correlation_id: str, message: str, services: Sequence[str]
    ) -> List[UpstreamStep]: ...


class TranscriptTransport(Protocol):
    async def save_transcript(self, correlation_id: Optional[str]) -> Dict[str, Any]: ...


class ConversationStateMachine:
    """One widget instance's conversation."""

    def __init__(
        self,
        transport: ConversationTransport,
        identity: IdentityManager,
        transcript_sink: Optional[TranscriptTransport] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Args:
            transport: Bootstrap/message turns (UpstreamGateway or NovaApiClient)
            identity: Source of the CorrelationId, read once per session
            transcript_sink: Optional target for fire-and-forget transcript saves
            logger: Logger instance
        """
        self.transport = transport
        self.identity = identity
        self.transcript_sink = transcript_sink
        self.logger = logger or session_logger

        self.input_buffer = ""
        self.bootstrapped = False
        self._state = TurnState.IDLE
        self._entries: List[ConversationEntry] = []
        self._selected_services: List[str] = []
        self._correlation_id: Optional[str] = None
        self._listeners: List[EntryListener] = []
        self._background: Set["asyncio.Task[None]"] = set()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def entries(self) -> Tuple[ConversationEntry, ...]:
        return tuple(self._entries)

    @property
    def selected_services(self) -> Tuple[str, ...]:
        return tuple(self._selected_services)

    @property
    def correlation_id(self) -> Optional[str]:
        """The session's CorrelationId; cached after the first successful read."""
        if self._correlation_id is None:
            self._correlation_id = self.identity.get_or_create_id()
        return self._correlation_id

    @property
    def is_ready(self) -> bool:
        return self.correlation_id is not None

    @property
    def input_enabled(self) -> bool:
        return self._state.accepts_submission and self.is_ready

    @property
    def has_pending(self) -> bool:
        return any(entry.pending for entry in self._entries)

    # ------------------------------------------------------------------
    # Page-side context
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        self.input_buffer = text

    def select_service(self, tag: str) -> None:
        if tag not in self._selected_services:
            self._selected_services.append(tag)

    def deselect_service(self, tag: str) -> None:
        if tag in self._selected_services:
            self._selected_services.remove(tag)

    def set_selected_services(self, tags: Iterable[str]) -> None:
        self._selected_services = list(dict.fromkeys(tags))

    def add_listener(self, listener: EntryListener) -> None:
        """Register a callback run after every append (e.g. scroll to newest)."""
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # Turn lifecycle
    # ------------------------------------------------------------------

    async def submit(self, message: Optional[str] = None) -> Optional[TurnState]:
        """
        Run one turn with `message` (default: the input buffer).

        Returns:
            SETTLED or FAILED for an accepted turn, None when the submission
            was rejected without any state change (blank text, no
            CorrelationId yet, or a turn already in flight).
        """
        text = self.input_buffer if message is None else message
        if not self._state.accepts_submission:
            self.logger.debug("Submission ignored, turn in flight", state=self._state.value)
            return None
        if not text or not text.strip():
            return None
        correlation_id = self.correlation_id
        if correlation_id is None:
            self.logger.debug("Submission ignored, no correlation id yet")
            return None

        self._transition(TurnState.SENDING)
        self._append(ConversationEntry.user(text))
        self.input_buffer = ""
        self._append(ConversationEntry.placeholder())
        services = list(self._selected_services)

        try:
            if not self.bootstrapped:
                await self._bootstrap(correlation_id)

            self._transition(TurnState.AWAITING_UPSTREAM)
            steps = await self.transport.send_message(correlation_id, text, services)
            replies = entries_from_steps(steps)
        except asyncio.CancelledError:
            self._abandon_turn()
            raise
        except Exception as exc:
            return self._fail_turn(correlation_id, exc)

        self._selected_services = []
        self._remove_placeholder()
        for entry in replies:
            self._append(entry)
        self._transition(TurnState.SETTLED)
        self.logger.info("Turn settled", correlation_id=correlation_id, replies=len(replies))
        return self._state

    async def _bootstrap(self, correlation_id: str) -> None:
        try:
            await self.transport.bootstrap(correlation_id)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Advisory: the message turn still goes out, bootstrap is retried next turn.
            self.logger.warning(
                "Bootstrap failed, continuing with message turn",
                correlation_id=correlation_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return
        self.bootstrapped = True

    def _fail_turn(self, correlation_id: str, exc: Exception) -> TurnState:
        self.logger.error(
            "Turn failed",
            correlation_id=correlation_id,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        self._remove_placeholder()
        self._append(ConversationEntry.apology())
        self._transition(TurnState.FAILED)
        return self._state

    def _abandon_turn(self) -> None:
        self._remove_placeholder()
        self._state = TurnState.FAILED

    def _transition(self, target: TurnState) -> None:
        if target not in _TRANSITIONS.get(self._state, frozenset()):
            raise InvalidTurnStateError(self._state.value, target.value)
        self._state = target

    def _append(self, entry: ConversationEntry) -> None:
        self._entries.append(entry)
        for listener in list(self._listeners):
            try:
                listener(entry)
            except Exception as exc:
                self.logger.error("Entry listener raised", listener=repr(listener), error=str(exc))

    def _remove_placeholder(self) -> None:
        self._entries = [entry for entry in self._entries if not entry.pending]

    # ------------------------------------------------------------------
    # Transcripts
    # ------------------------------------------------------------------

    def save_transcript(self) -> Optional["asyncio.Task[None]"]:
        """Schedule a best-effort transcript save; never touches conversation state.

        Must be called from a running event loop. Returns the scheduled task,
        or None when there is no sink or no CorrelationId yet.
        """
        if self.transcript_sink is None:
            return None
        correlation_id = self.correlation_id
        if correlation_id is None:
            self.logger.warning("Transcript save skipped, no correlation id yet")
            return None
        task = asyncio.get_running_loop().create_task(
            self._save_transcript(self.transcript_sink, correlation_id)
        )
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def _save_transcript(self, sink: TranscriptTransport, correlation_id: str) -> None:
        try:
            await sink.save_transcript(correlation_id)
        except Exception as exc:
            self.logger.error(
                "Transcript save failed",
                correlation_id=correlation_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return
        self.logger.info("Transcript save requested", correlation_id=correlation_id)
