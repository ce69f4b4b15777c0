"""OCR recognition client using a DashScope Qwen-VL model.

One image plus a fixed instruction goes out per call, one text comes back.
Every failure (SDK missing, no key, transport, auth, quota, bad response) is
logged and re-raised as ``RecognitionUnavailable`` with a fixed message.
"""

from __future__ import annotations

import logging
from http import HTTPStatus

from config import RecognizerConfig
from errors import RecognitionUnavailable
from models import ImagePayload, RecognitionResult, strip_data_url_prefix

try:
    import dashscope
except Exception:  # pragma: no cover
    dashscope = None  # type: ignore

logger = logging.getLogger(__name__)

# Changing this text changes recognition behaviour.
OCR_PROMPT = (
    "Please perform Optical Character Recognition (OCR) on this image. "
    "Extract all visible text exactly as it appears. "
    "Preserve line breaks where possible. "
    "If there is no text, reply with 'No text detected'."
)
NO_TEXT_SENTINEL = "No text detected"
FALLBACK_TEXT = "No text returned from model."


def build_messages(payload: ImagePayload) -> list[dict]:
    """Build the single-turn multimodal request for ``payload``."""
    clean = strip_data_url_prefix(payload.data)
    return [
        {
            "role": "user",
            "content": [
                {"image": f"data:{payload.mime_type};base64,{clean}"},
                {"text": OCR_PROMPT},
            ],
        }
    ]


class DashscopeRecognitionClient:
    def __init__(self, config: RecognizerConfig) -> None:
        self._config = config

    @property
    def model(self) -> str:
        return self._config.model

    def recognize_text(self, payload: ImagePayload) -> RecognitionResult:
        if dashscope is None:
            logger.error("dashscope is not installed")
            raise RecognitionUnavailable()
        if not self._config.api_key:
            logger.error("No API key configured")
            raise RecognitionUnavailable()

        try:
            response = dashscope.MultiModalConversation.call(
                api_key=self._config.api_key,
                model=self._config.model,
                messages=build_messages(payload),
                temperature=self._config.temperature,
            )
        except Exception as exc:
            logger.exception("OCR request failed: %s", exc)
            raise RecognitionUnavailable() from exc

        status = self._status_code(response)
        if status != HTTPStatus.OK:
            logger.error(
                "OCR request rejected: status=%s code=%s message=%s",
                status,
                self._field(response, "code"),
                self._field(response, "message"),
            )
            raise RecognitionUnavailable()

        try:
            text = self._extract_text(response)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.exception("Malformed OCR response: %r", response)
            raise RecognitionUnavailable() from exc

        return RecognitionResult(text=text or FALLBACK_TEXT)

    def _status_code(self, response: object) -> object:
        return self._field(response, "status_code")

    def _field(self, response: object, name: str) -> object:
        if isinstance(response, dict):
            return response.get(name)
        return getattr(response, name, None)

    def _extract_text(self, response: object) -> str:
        """Pull text from a MultiModalConversation response dict."""
        output = response["output"]  # type: ignore[index]
        choices = output["choices"]
        if not choices:
            return ""
        content = choices[0]["message"]["content"]
        if isinstance(content, str):
            return content
        parts = []
        for item in content:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if text is None:
                continue
            if not isinstance(text, str):
                raise TypeError(f"text part is {type(text).__name__}")
            parts.append(text)
        return "".join(parts)
