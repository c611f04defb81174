"""
Keeps at most one utterance alive at a time.

The TTS engine is a pair of async callbacks (``say`` and ``hush``). The engine
may report completion late or not at all; completion for anything but the
current utterance is dropped so stale narration never reaches the session.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from ..models.session import (
    NarrationCancelled,
    NarrationEnded,
    NarrationEvent,
    NarrationStarted,
)

log = logging.getLogger(__name__)

SayCallback = Callable[[int, str], Awaitable[None]]
HushCallback = Callable[[int], Awaitable[None]]


class NarrationCoordinator:
    def __init__(self, say: SayCallback, hush: Optional[HushCallback] = None):
        self.say = say
        self.hush = hush
        self.current_id: Optional[int] = None
        self._next_id = 0

    @property
    def active(self) -> bool:
        return self.current_id is not None

    async def speak(self, text: str) -> List[NarrationEvent]:
        events: List[NarrationEvent] = await self.stop()

        self._next_id += 1
        utterance_id = self._next_id
        try:
            await self.say(utterance_id, text)
        except Exception as e:
            log.warning(f"Narration engine failed, skipping utterance: {e}")
            return events

        self.current_id = utterance_id
        events.append(NarrationStarted(utterance_id=utterance_id, text=text))
        return events

    async def stop(self) -> List[NarrationEvent]:
        if not self.active:
            return []
        utterance_id = self.current_id
        self.current_id = None
        if self.hush is not None:
            try:
                await self.hush(utterance_id)
            except Exception as e:
                log.warning(f"Narration engine failed to cancel utterance {utterance_id}: {e}")
        return [NarrationCancelled(utterance_id=utterance_id)]

    def engine_finished(self, utterance_id: int) -> List[NarrationEvent]:
        """Called when the TTS engine reports that an utterance played out."""
        if utterance_id != self.current_id:
            log.debug(f"Ignoring completion of stale utterance {utterance_id}")
            return []
        self.current_id = None
        return [NarrationEnded(utterance_id=utterance_id)]
