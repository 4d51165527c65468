"""Telegram Bot API client: upload a document and turn it into a download link."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

import aiohttp

from .config import Config
from .errors import (
    NetworkError,
    ResolveFailed,
    UploadRejected,
    UploadResponseMalformed,
)
from .file_source import CHUNK_SIZE, Uploadable
from .progress import NullProgress, ProgressSink

logger = logging.getLogger(__name__)

# sendDocument may store some files as another media type
MEDIA_KEYS = ("document", "animation", "video", "audio", "voice", "sticker")


@dataclass(frozen=True)
class UploadResult:
    document_id: str


@dataclass(frozen=True)
class ResolvedPath:
    relative_path: str


@dataclass(frozen=True)
class UploadedFile:
    document_id: str
    relative_path: str
    url: str


def build_file_url(config: Config, relative_path: str) -> str:
    """Download URL for a file path returned by getFile."""
    return f"{config.api_base}/file/bot{config.bot_token}/{relative_path}"


def parse_envelope(text: str) -> dict:
    """
    Decode a Bot API response body.

    Returns the envelope dict with a boolean ``ok``; raises ValueError when
    the body is not a JSON object of that shape.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        raise ValueError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("response is not a JSON object")
    if not isinstance(data.get("ok"), bool):
        raise ValueError("field 'ok' missing or not a boolean")
    return data


def _rejection(envelope: dict) -> UploadRejected:
    description = envelope.get("description")
    error_code = envelope.get("error_code")
    return UploadRejected(
        description if isinstance(description, str) else None,
        error_code if isinstance(error_code, int) else None,
    )


def parse_upload_response(text: str) -> UploadResult:
    try:
        envelope = parse_envelope(text)
    except ValueError as e:
        raise UploadResponseMalformed(str(e)) from e

    result = envelope.get("result")
    if not envelope["ok"] or result is None:
        raise _rejection(envelope)
    if not isinstance(result, dict):
        raise UploadResponseMalformed("field 'result' is not an object")

    for key in MEDIA_KEYS:
        media = result.get(key)
        if isinstance(media, dict):
            file_id = media.get("file_id")
            if isinstance(file_id, str) and file_id:
                return UploadResult(document_id=file_id)
    raise UploadResponseMalformed("result.document.file_id missing")


def parse_file_path_response(text: str) -> ResolvedPath:
    try:
        envelope = parse_envelope(text)
    except ValueError as e:
        raise ResolveFailed(str(e)) from e

    if not envelope["ok"]:
        description = envelope.get("description") or "request declined"
        raise ResolveFailed(str(description))

    result = envelope.get("result")
    file_path = result.get("file_path") if isinstance(result, dict) else None
    if not isinstance(file_path, str) or not file_path:
        raise ResolveFailed("file_path not found")
    return ResolvedPath(relative_path=file_path)


class TelegramClient:
    """
    Minimal Bot API client for the sendDocument → getFile sequence.

    A new session is opened per request; only one upload and one resolve
    call are ever in flight.
    """

    def __init__(
        self,
        config: Config,
        chunk_size: int = CHUNK_SIZE,
        timeout: Optional[aiohttp.ClientTimeout] = None,
    ):
        self.config = config
        self.chunk_size = chunk_size
        # no total timeout, uploads of up to 20 MB can be slow
        self.timeout = timeout or aiohttp.ClientTimeout(total=None, sock_connect=30)

    @property
    def bot_url(self) -> str:
        return f"{self.config.api_base}/bot{self.config.bot_token}"

    @property
    def send_document_url(self) -> str:
        return f"{self.bot_url}/sendDocument"

    @property
    def get_file_url(self) -> str:
        return f"{self.bot_url}/getFile"

    def file_url(self, relative_path: str) -> str:
        return build_file_url(self.config, relative_path)

    def redact(self, url: str) -> str:
        """Hide the bot token in URLs before they are logged."""
        return url.replace(self.config.bot_token, "<token>")

    async def _stream(self, uploadable: Uploadable, progress: ProgressSink) -> AsyncIterator[bytes]:
        total = uploadable.byte_length
        sent = 0
        if total == 0:
            progress.on_complete(total)
        async for chunk in uploadable.iter_chunks(self.chunk_size):
            yield chunk
            # resumed by the writer once the chunk went out
            sent += len(chunk)
            progress.on_progress(sent, total)
            if sent == total:
                progress.on_complete(total)

    async def upload_document(
        self,
        uploadable: Uploadable,
        progress: Optional[ProgressSink] = None,
    ) -> UploadResult:
        """
        Upload a file with sendDocument.

        Args:
            uploadable: File to stream as the ``document`` part
            progress: Receives cumulative byte counts while streaming

        Returns:
            The ``file_id`` Telegram assigned to the document

        Raises:
            UploadRejected: the API answered with ``ok: false`` or no result
            UploadResponseMalformed: the body is not the expected envelope
            NetworkError: the request could not be completed
        """
        progress = progress or NullProgress()
        url = self.send_document_url
        logger.info(
            "Uploading %s (%d bytes) to %s",
            uploadable.path, uploadable.byte_length, self.redact(url),
        )

        form = aiohttp.FormData()
        form.add_field(
            "document",
            self._stream(uploadable, progress),
            filename=uploadable.filename,
            content_type=uploadable.content_type,
        )

        try:
            try:
                async with aiohttp.ClientSession(timeout=self.timeout) as session:
                    async with session.post(
                        url, params={"chat_id": self.config.chat_id}, data=form
                    ) as resp:
                        text = await resp.text()
                        logger.info("sendDocument answered with HTTP %d", resp.status)
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                raise NetworkError("upload", e, self.redact(str(e))) from e
            result = parse_upload_response(text)
        except Exception as e:
            progress.on_failure(e)
            raise

        logger.info("Uploaded document %s", result.document_id)
        return result

    async def get_file_path(self, document_id: str) -> ResolvedPath:
        """
        Resolve a document id to its storage path with getFile.

        Raises:
            ResolveFailed: the API declined or returned no ``file_path``
            NetworkError: the request could not be completed
        """
        url = self.get_file_url
        logger.info("Resolving document %s via %s", document_id, self.redact(url))
        payload: dict[str, Any] = {"file_id": document_id}
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(
                    url,
                    data=json.dumps(payload),
                    headers={"Content-Type": "application/json"},
                ) as resp:
                    text = await resp.text()
                    logger.info("getFile answered with HTTP %d", resp.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError("file lookup", e, self.redact(str(e))) from e

        resolved = parse_file_path_response(text)
        logger.info("Document %s stored at %s", document_id, resolved.relative_path)
        return resolved

    async def upload_and_link(
        self,
        uploadable: Uploadable,
        progress: Optional[ProgressSink] = None,
    ) -> UploadedFile:
        """Upload, resolve and build the download URL in one go."""
        uploaded = await self.upload_document(uploadable, progress)
        resolved = await self.get_file_path(uploaded.document_id)
        return UploadedFile(
            document_id=uploaded.document_id,
            relative_path=resolved.relative_path,
            url=self.file_url(resolved.relative_path),
        )
