"""OpenAI speech-to-text backend."""

import asyncio
import json
import logging
import mimetypes
import os
import time

import aiohttp

from ..errors import LocalIOError, RemoteAPIError
from .base import AbstractTranscriptionBackend

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini-transcribe"
DEFAULT_BASE_URL = "https://api.openai.com/v1"


def _error_detail(body: str) -> str:
    """Pull the human-readable message out of an OpenAI error payload."""
    try:
        payload = json.loads(body)
    except ValueError:
        return body.strip()
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        return payload["error"].get("message") or body.strip()
    return body.strip()


class OpenAITranscriptionBackend(AbstractTranscriptionBackend):
    """Uploads audio to the OpenAI transcription endpoint."""

    service_name = "OpenAI"

    def __init__(self,
                 api_key: str,
                 model: str = DEFAULT_MODEL,
                 base_url: str = DEFAULT_BASE_URL,
                 timeout_seconds: float = 300.0):
        """Initialize OpenAI transcription backend.

        Args:
            api_key: OpenAI API key
            model: Transcription model name
            base_url: API root, without the endpoint path
            timeout_seconds: Total timeout for one upload and response
        """
        self.api_key = api_key
        self.model = model
        self.url = f"{base_url.rstrip('/')}/audio/transcriptions"
        self.timeout_seconds = timeout_seconds

        logger.info(f"OpenAITranscriptionBackend initialized with model: {model}")

    def has_credentials(self) -> bool:
        return bool(self.api_key)

    def _build_form(self, audio_path: str) -> aiohttp.FormData:
        try:
            with open(audio_path, 'rb') as f:
                audio = f.read()
        except OSError as e:
            raise LocalIOError(f"reading {audio_path}: {e}") from e

        filename = os.path.basename(audio_path)
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        form = aiohttp.FormData()
        form.add_field("model", self.model)
        form.add_field("file", audio, filename=filename, content_type=content_type)
        return form

    async def transcribe_file(self, audio_path: str) -> str:
        start_time = time.time()
        form = self._build_form(audio_path)
        headers = {"Authorization": f"Bearer {self.api_key}"}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        logger.debug(f"Uploading {audio_path} to {self.url} (model={self.model})")
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.url, headers=headers, data=form) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise RemoteAPIError(
                            f"API error: {response.status} - {_error_detail(error_text)}"
                        )
                    result = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise RemoteAPIError(f"API error: no response within {self.timeout_seconds:g}s") from e
        except aiohttp.ClientError as e:
            raise RemoteAPIError(f"API error: {e}") from e
        except ValueError as e:
            raise RemoteAPIError(f"API error: invalid JSON response: {e}") from e

        text = result.get("text") if isinstance(result, dict) else None
        if not isinstance(text, str):
            raise RemoteAPIError("API error: response has no text field")

        logger.debug(f"Transcribed {audio_path} in {time.time() - start_time:.2f}s ({len(text)} chars)")
        return text
