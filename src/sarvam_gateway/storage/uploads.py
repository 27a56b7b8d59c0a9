"""
Temporary staging of uploaded documents.

The provider SDK uploads from a file path, so an incoming upload is copied
to ``{temp_dir}/temp_<epoch-ms>_<basename>`` for the duration of the push
and removed afterwards, whether the push succeeded or not.
"""
from __future__ import annotations

import shutil
import time
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from sarvam_gateway.core.logging import debug, get_logger, warn
from sarvam_gateway.storage.audio_store import sanitize_filename

_LOG = get_logger("sarvam-gateway.uploads")

_COPY_CHUNK = 1024 * 1024


def temp_upload_path(temp_dir: str, filename: str) -> Path:
    """Build the staging path for an upload."""
    safe = sanitize_filename(filename) or "upload"
    return Path(temp_dir) / f"temp_{int(time.time() * 1000)}_{safe}"


@contextmanager
def staged_upload(temp_dir: str, filename: str, stream: BinaryIO) -> Iterator[Path]:
    """
    Copy an upload stream to a temporary file and delete it on exit.

    Args:
        temp_dir: Directory for staging files (created if missing).
        filename: Client-supplied filename.
        stream: Readable binary stream positioned at the start of the upload.

    Yields:
        Path of the staged file.
    """
    path = temp_upload_path(temp_dir, filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("wb") as out:
            shutil.copyfileobj(stream, out, _COPY_CHUNK)
        debug(_LOG, "upload_staged", path=str(path), bytes=path.stat().st_size)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            warn(_LOG, "upload_cleanup_failed", path=str(path), error=str(e))
            raise
