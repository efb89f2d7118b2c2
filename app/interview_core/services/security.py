"""
Purpose: Guardrails for raw candidate input before it reaches the engine.
Content: early, predictable normalization; strip control characters, clip
oversized answers and résumés, and redact obvious PII (emails, phone numbers)
before answers and résumés are stored.
"""

from __future__ import annotations
import re

EMAIL = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.I)
PHONE = re.compile(r"\+?\d[\d\s().-]{7,}\d")
MIN_PHONE_DIGITS = 9

DEFAULT_MAX_RESPONSE_CHARS = 10000
MAX_RESUME_CHARS = 20000

_CONTROL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def _mask(match: re.Match, label: str) -> str:
    # year ranges like "2016 - 2019" also fit the phone pattern
    if label == "PHONE" and sum(c.isdigit() for c in match.group(0)) < MIN_PHONE_DIGITS:
        return match.group(0)
    return f"[{label}]"


class InputGuard:
    def __init__(self, *, max_response_chars: int = DEFAULT_MAX_RESPONSE_CHARS) -> None:
        if max_response_chars <= 0:
            raise ValueError("max_response_chars must be positive")
        self.max_response_chars = max_response_chars

    def sanitize(self, text: str) -> str:
        return _CONTROL.sub("", text or "").strip()

    def clip_response(self, text: str) -> str:
        return text[: self.max_response_chars]

    def prepare_response(self, text: str) -> str:
        """Trim, strip control characters and clip to the configured length."""
        return self.clip_response(self.sanitize(text))

    def prepare_resume(self, text: str) -> str:
        return self.sanitize(text)[:MAX_RESUME_CHARS]

    def redact_pii(self, text: str) -> tuple[str, list[str]]:
        found = []
        for rx, label in ((EMAIL, "EMAIL"), (PHONE, "PHONE")):
            masked = rx.sub(lambda m, label=label: _mask(m, label), text)
            if masked != text:
                found.append(label)
                text = masked
        return text, found
