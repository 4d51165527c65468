"""Local file access for uploads."""

import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Union

import aiofiles

from .errors import FileNotFound, FileTooLarge

# getFile only serves files up to 20 MB, so larger uploads could never be linked
SIZE_LIMIT = 20_000_000

CHUNK_SIZE = 64 * 1024

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class Uploadable:
    """A local file checked against the size limit, ready to be streamed."""

    path: Path
    byte_length: int

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def content_type(self) -> str:
        guessed, _ = mimetypes.guess_type(self.path.name)
        return guessed or DEFAULT_CONTENT_TYPE

    async def iter_chunks(self, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
        """Read the file in fixed-size chunks, stopping at ``byte_length``. Single pass."""
        remaining = self.byte_length
        async with aiofiles.open(self.path, "rb") as f:
            while remaining > 0:
                chunk = await f.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk


def open_uploadable(path: Union[str, Path], limit: int = SIZE_LIMIT) -> Uploadable:
    """
    Stat a local file and make sure it may be uploaded.

    Raises:
        FileNotFound: missing, not a regular file, or not readable
        FileTooLarge: larger than ``limit`` bytes
    """
    path = Path(path)
    try:
        st = path.stat()
    except OSError as e:
        raise FileNotFound(path) from e
    if not path.is_file() or not os.access(path, os.R_OK):
        raise FileNotFound(path)

    if st.st_size > limit:
        raise FileTooLarge(path, st.st_size, limit)

    return Uploadable(path=path, byte_length=st.st_size)
