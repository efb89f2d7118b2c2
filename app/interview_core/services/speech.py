"""
Purpose: Speech in and out for voice-mode practice. Whisper-style
transcription of recorded answers and text-to-speech read-outs of questions
and feedback, both through the OpenAI audio endpoints.

Voice is optional: without an API key the app runs text-only and every call
here raises InteractionModeError, which the UI reports instead of crashing.

Testing: pass a fake client exposing `audio.transcriptions.create` and
`audio.speech.create`.
"""

from __future__ import annotations
import base64
import io
import logging
import time
import uuid
from typing import Any, Callable, Optional

from openai import APIConnectionError, APITimeoutError, OpenAI, OpenAIError, RateLimitError

from ..config import Settings
from ..errors import InteractionModeError

logger = logging.getLogger(__name__)

MAX_TTS_CHARS = 1200
RETRY_DELAYS = (0.5, 1.0, 2.0)


class SpeechService:
    def __init__(
        self,
        client: Any = None,
        *,
        stt_model: str = "whisper-1",
        tts_model: str = "gpt-4o-mini-tts",
        voice: str = "alloy",
        max_chars: int = MAX_TTS_CHARS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.stt_model = stt_model
        self.tts_model = tts_model
        self.voice = voice
        self.max_chars = max_chars
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpeechService":
        client = OpenAI(api_key=settings.openai_api_key) if settings.voice_enabled else None
        return cls(
            client,
            stt_model=settings.stt_model,
            tts_model=settings.tts_model,
            voice=settings.tts_voice,
        )

    @property
    def available(self) -> bool:
        return self.client is not None

    def _require_client(self) -> Any:
        if self.client is None:
            raise InteractionModeError(
                "Voice mode requires OPENAI_API_KEY to be configured", mode="voice"
            )
        return self.client

    def _with_retries(self, fn, *args, **kwargs):
        for delay in RETRY_DELAYS:
            try:
                return fn(*args, **kwargs)
            except (RateLimitError, APITimeoutError, APIConnectionError) as e:
                logger.warning("Speech call failed (%s), retrying in %.1fs", type(e).__name__, delay)
                self._sleep(delay)
        return fn(*args, **kwargs)

    def transcribe_wav_bytes(self, wav_bytes: bytes) -> str:
        """Transcribe WAV audio to text. Empty audio gives an empty string."""
        if not wav_bytes:
            return ""
        client = self._require_client()
        try:
            with io.BytesIO(wav_bytes) as buf:
                buf.name = "input.wav"

                def call():
                    buf.seek(0)
                    return client.audio.transcriptions.create(model=self.stt_model, file=buf)

                resp = self._with_retries(call)
        except OpenAIError as e:
            logger.error("Transcription failed: %s", e)
            raise InteractionModeError(f"Transcription failed: {e}", mode="voice") from e
        return (resp.text or "").strip()

    def tts_bytes(self, text: str) -> bytes:
        """Return raw MP3 bytes for `text`, truncated to `max_chars`."""
        safe = (text or "").strip()
        if not safe:
            return b""
        if len(safe) > self.max_chars:
            safe = safe[: self.max_chars - 1].rstrip() + "…"
        client = self._require_client()
        try:
            resp = self._with_retries(
                client.audio.speech.create, model=self.tts_model, voice=self.voice, input=safe
            )
        except OpenAIError as e:
            logger.error("Text-to-speech failed: %s", e)
            raise InteractionModeError(f"Text-to-speech failed: {e}", mode="voice") from e
        if hasattr(resp, "read"):
            return resp.read()
        return getattr(resp, "content", b"") or b""


def autoplay_html(mp3_bytes: bytes, *, element_id: Optional[str] = None) -> str:
    """Return a hidden HTML audio element that auto-plays MP3 bytes."""
    if not mp3_bytes:
        return ""
    b64 = base64.b64encode(mp3_bytes).decode("ascii")
    el_id = element_id or f"tts_{uuid.uuid4().hex}"
    return f"""
    <audio id="{el_id}" autoplay playsinline preload="auto" style="display:none">
      <source src="data:audio/mpeg;base64,{b64}" type="audio/mpeg">
    </audio>
    <script>
      (function() {{
        const a = document.getElementById("{el_id}");
        if (a) {{
          // Autoplay may be blocked until the user interacts with the page
          a.play().catch(() => {{}});
        }}
      }})();
    </script>
    """
