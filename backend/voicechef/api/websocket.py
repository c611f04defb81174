from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import TypeAdapter, ValidationError
from starlette.websockets import WebSocketState
import logging
import asyncio
import json

from ..core.audio_processor import AudioProcessor
from ..core.config import get_settings
from ..core.narration import NarrationCoordinator
from ..core.session import CookingSession
from ..exceptions import RecipeNotFound, TranscriberError
from ..models.commands import Command
from ..models.recipe import Recipe
from ..models.session import SearchEffect, SessionState, ShowIngredientsEffect, UiGoToStep, UiNavigate
from ..services.favorites import FavoritesStore
from ..services.realtime_transcriber import RealtimeTranscriber, validate_api_key
from ..services.recipe_catalog import RecipeCatalog
from .deps import get_catalog, get_favorites

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")

command_adapter = TypeAdapter(Command)


def default_recipe(catalog: RecipeCatalog) -> Recipe:
    try:
        return catalog.get(get_settings().default_recipe_id)
    except RecipeNotFound:
        return RecipeCatalog.sample().list()[0]


async def _send(ws: WebSocket, payload: dict) -> None:
    if ws.application_state == WebSocketState.CONNECTED:
        await ws.send_json(payload)
    else:
        log.warning(f"❌ WebSocket not connected, dropped '{payload.get('type')}' message")


def build_session(ws: WebSocket, catalog: RecipeCatalog, favorites: FavoritesStore) -> CookingSession:
    """Wire a session whose TTS engine and renderer are the browser."""

    async def say(utterance_id: int, text: str):
        log.info(f"🔊 Narrating #{utterance_id}: '{text[:100]}{'...' if len(text) > 100 else ''}'")
        await _send(ws, {"type": "tts", "utterance_id": utterance_id, "text": text})

    async def hush(utterance_id: int):
        await _send(ws, {"type": "tts_cancel", "utterance_id": utterance_id})

    async def render(state: SessionState):
        await _send(ws, {"type": "state", "state": state.snapshot()})

    async def intent(effect):
        if isinstance(effect, ShowIngredientsEffect):
            await _send(ws, {"type": "ingredients", "ingredients": effect.ingredients})
        elif isinstance(effect, SearchEffect):
            results = [{"id": r.id, "title": r.title} for r in catalog.search(effect.query)]
            await _send(ws, {"type": "search", "query": effect.query, "results": results})

    settings = get_settings()
    session = CookingSession(
        catalog=catalog,
        favorites=favorites,
        narrator=NarrationCoordinator(say, hush),
        default_recipe=default_recipe(catalog),
        tick_interval=settings.tick_interval_seconds,
    )
    session.subscribe(render)
    session.on_intent(intent)
    return session


def handle_control(session: CookingSession, message: dict) -> None:
    """
    Route one client control message into the session queue.

    Raises ValueError for messages the protocol does not know.
    """
    kind = message.get("type")
    if kind == "load":
        session.request_load(str(message.get("recipe_id", "")))
    elif kind == "transcript":
        session.submit_transcript(str(message.get("text", "")), final=bool(message.get("final", True)))
    elif kind == "navigate":
        session.submit(UiNavigate(direction=message.get("direction")))
    elif kind == "go_to_step":
        session.submit(UiGoToStep(index=message.get("index")))
    elif kind == "command":
        session.submit(command_adapter.validate_python(message.get("command")))
    elif kind == "narration_ended":
        session.narration_finished(int(message.get("utterance_id")))
    else:
        raise ValueError(f"Unknown message type: {kind!r}")


async def _receive_loop(ws: WebSocket, session: CookingSession, on_audio=None) -> None:
    """Read frames until the client goes away: text is control, bytes are audio."""
    while True:
        message = await ws.receive()
        if message["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(message.get("code", 1000))

        if message.get("text") is not None:
            try:
                handle_control(session, json.loads(message["text"]))
            except (ValueError, TypeError, AttributeError, ValidationError) as e:
                log.warning(f"⚠️ Bad control message: {e}")
                await _send(ws, {"type": "error", "message": str(e)})
        elif message.get("bytes") is not None:
            if on_audio is None:
                log.debug("🎵 Audio frame on a transcript-only socket ignored")
                continue
            await on_audio(message["bytes"])


async def _serve(ws: WebSocket, session: CookingSession, *sources) -> None:
    consumer = asyncio.create_task(session.run())
    session.start_ticker()
    tasks = [asyncio.create_task(source) for source in sources]
    try:
        await asyncio.gather(*tasks)
    except WebSocketDisconnect:
        log.info("👋 Client disconnected normally")
    except TranscriberError as e:
        log.error(f"💥 Transcriber error: {e}")
        await _send(ws, {"type": "error", "message": str(e)})
    finally:
        for task in tasks:
            task.cancel()
        await session.close()
        await consumer
        log.info("🛑 Session closed")


@router.websocket("/ws")
async def session_endpoint(
    ws: WebSocket,
    catalog: RecipeCatalog = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
):
    """Cooking session driven by transcripts the client recognised itself."""
    await ws.accept()
    log.info("✅ Session WebSocket accepted")

    session = build_session(ws, catalog, favorites)
    await _serve(ws, session, _receive_loop(ws, session))


@router.websocket("/ws/audio")
async def audio_session_endpoint(
    ws: WebSocket,
    catalog: RecipeCatalog = Depends(get_catalog),
    favorites: FavoritesStore = Depends(get_favorites),
):
    """Cooking session that also accepts raw microphone audio and transcribes it server-side."""
    await ws.accept()
    log.info("✅ Audio session WebSocket accepted")

    settings = get_settings()
    if not settings.transcription_enabled or not await validate_api_key(settings.openai_api_key):
        log.error("❌ OpenAI API key not configured")
        await ws.send_json({
            "type": "error",
            "message": "Server-side transcription is unavailable. Set OPENAI_API_KEY or send transcripts on /api/v1/ws.",
        })
        await ws.close()
        return

    session = build_session(ws, catalog, favorites)
    audio_processor = AudioProcessor()

    try:
        async with RealtimeTranscriber() as transcriber:

            async def push(pcm: bytes):
                await transcriber.push_audio(audio_processor.downsample(pcm))

            async def feed_transcripts():
                async for transcript in transcriber.transcripts():
                    await _send(ws, {"type": "transcription", "text": transcript})
                    session.submit_transcript(transcript)

            await _serve(ws, session, _receive_loop(ws, session, on_audio=push), feed_transcripts())
    except (TranscriberError, OSError) as e:
        log.error(f"💥 OpenAI connection error: {e}")
        await _send(ws, {"type": "error", "message": f"Transcription connection failed: {e}"})
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.close()
