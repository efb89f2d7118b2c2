"""Interaction-mode factory: text and voice presentation of the same interview."""

from __future__ import annotations
from typing import Any, Optional, Union

from ..errors import InteractionModeError
from ..interfaces import InteractionMode
from ..models import InteractionModeType
from ..services.speech import SpeechService
from .formatting import format_feedback
from .text_mode import TextInteractionMode
from .voice_mode import VoiceInteractionMode

__all__ = [
    "TextInteractionMode",
    "VoiceInteractionMode",
    "create_mode",
    "create_text_mode",
    "create_voice_mode",
    "format_feedback",
    "get_available_modes",
]


def create_text_mode(**config: Any) -> TextInteractionMode:
    return TextInteractionMode(**config)


def create_voice_mode(speech: Optional[SpeechService] = None, **config: Any) -> VoiceInteractionMode:
    return VoiceInteractionMode(speech, **config)


def create_mode(mode: Union[InteractionModeType, str], **config: Any) -> InteractionMode:
    value = mode.value if isinstance(mode, InteractionModeType) else str(mode)
    if value == InteractionModeType.TEXT.value:
        return create_text_mode(**config)
    if value == InteractionModeType.VOICE.value:
        return create_voice_mode(**config)
    raise InteractionModeError(f"Unsupported interaction mode: {value}", mode=value)


def get_available_modes() -> list[str]:
    return [m.value for m in InteractionModeType]
