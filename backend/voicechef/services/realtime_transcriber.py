"""
Speech-to-text over the OpenAI Realtime API, used in transcription-only
mode: the model never answers, it only reports what the user said.
"""

import base64
import json
import logging
from typing import AsyncIterator, Optional

import openai
from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed

from ..core.config import get_settings
from ..exceptions import TranscriberError

log = logging.getLogger(__name__)
MODEL = "gpt-4o-realtime-preview-2024-12-17"
TRANSCRIPTION_MODEL = "whisper-1"


async def validate_api_key(api_key: str) -> bool:
    """Cheap authenticated call so a bad key fails before audio starts flowing."""
    try:
        client = openai.AsyncOpenAI(api_key=api_key)
        await client.models.list()
    except openai.OpenAIError as e:
        log.error(f"❌ OpenAI API key validation failed: {e}")
        return False
    log.info("✅ OpenAI API key validation successful")
    return True


class RealtimeTranscriber:
    def __init__(self):
        self.settings = get_settings()
        self.ws: Optional[ClientConnection] = None
        self.session_id = None

    async def __aenter__(self):
        url = f"wss://api.openai.com/v1/realtime?model={MODEL}"
        log.info(f"🔗 Connecting to OpenAI Realtime API: {url}")

        self.ws = await connect(
            url,
            additional_headers={
                "Authorization": f"Bearer {self.settings.openai_api_key}",
                "OpenAI-Beta": "realtime=v1",
            },
            max_size=4 * 1024 * 1024,
        )

        created = json.loads(await self.ws.recv())
        if created.get("type") != "session.created":
            await self.ws.close()
            raise TranscriberError(f"Expected session.created, got: {created.get('type')}")
        self.session_id = created["session"]["id"]
        log.info(f"✅ Session created: {self.session_id}")

        # Server VAD commits each utterance; no response is ever generated.
        await self._send({
            "type": "session.update",
            "session": {
                "modalities": ["text"],
                "input_audio_format": "pcm16",
                "input_audio_transcription": {"model": TRANSCRIPTION_MODEL},
                "turn_detection": {
                    "type": "server_vad",
                    "threshold": 0.5,
                    "prefix_padding_ms": 300,
                    "silence_duration_ms": 500,
                    "create_response": False,
                },
            },
        })
        return self

    async def __aexit__(self, *exc):
        if self.ws:
            await self.ws.close()
            log.info("🔌 Disconnected from OpenAI Realtime API")

    async def _send(self, message: dict):
        if not self.ws:
            raise TranscriberError("WebSocket not connected")
        await self.ws.send(json.dumps(message))
        log.debug(f"📤 Sent: {message['type']}")

    async def push_audio(self, pcm_bytes: bytes):
        """Append 16-bit PCM to the input audio buffer."""
        if not pcm_bytes:
            return
        await self._send({
            "type": "input_audio_buffer.append",
            "audio": base64.b64encode(pcm_bytes).decode("utf-8"),
        })

    async def transcripts(self) -> AsyncIterator[str]:
        """
        Yield one string per completed user utterance. Partial transcription
        deltas are logged and dropped.
        """
        if not self.ws:
            raise TranscriberError("WebSocket not connected")

        try:
            async for msg in self.ws:
                try:
                    data = json.loads(msg)
                except json.JSONDecodeError as e:
                    log.error(f"❌ Failed to parse JSON message: {e}")
                    continue

                event_type = data.get("type", "unknown")
                if event_type == "conversation.item.input_audio_transcription.completed":
                    transcript = (data.get("transcript") or "").strip()
                    if transcript:
                        log.info(f"🎯 User speech transcribed: '{transcript}'")
                        yield transcript
                elif event_type == "conversation.item.input_audio_transcription.delta":
                    log.debug(f"📝 Partial transcript: {data.get('delta')}")
                elif event_type == "conversation.item.input_audio_transcription.failed":
                    log.warning("❌ Speech transcription failed")
                elif event_type == "input_audio_buffer.speech_started":
                    log.info("🗣️ Speech start detected")
                elif event_type == "input_audio_buffer.speech_stopped":
                    log.info("🤫 Speech end detected")
                elif event_type == "error":
                    log.error(f"❌ OpenAI API error: {data.get('error', {})}")
                else:
                    log.debug(f"📋 Unhandled event type: {event_type}")
        except ConnectionClosed as e:
            raise TranscriberError(f"OpenAI connection closed: {e}") from e
