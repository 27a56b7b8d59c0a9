"""
Local Audio Storage for Synthesized Speech.

Generated audio lives in a single flat directory (``speech.audio_dir``,
``./audio`` by default) that is created on first use:

    {audio_dir}/
        tts_1760000000000_0.wav
        tts_1760000000000_1.wav
        tts_1760000000123_0.wav

Filenames are ``tts_<epoch-ms>_<index>.wav``. Files are written atomically
(temp file + rename) and never modified afterwards.

Retrieval strips any directory components from the requested name and
checks that the resolved path is still inside the audio directory, so a
traversal attempt such as ``../../etc/passwd`` resolves to ``passwd`` in
the audio directory and yields "not found".

Retention:
    With ``speech.ttl_seconds > 0`` an AudioRetentionManager removes WAV
    files older than the TTL in a background thread, at most once per
    cleanup interval. With 0 (the default) files are kept forever.

Usage:
    store = AudioStore("./audio")
    artifact = store.save(store.make_filename(0), wav_bytes)
    path = store.resolve(artifact.filename)
"""
from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from sarvam_gateway.core.logging import get_logger, info, verbose, warn

_LOG = get_logger("sarvam-gateway.storage")

AUDIO_SUFFIX = ".wav"
AUDIO_MEDIA_TYPE = "audio/wav"


@dataclass(frozen=True)
class AudioArtifact:
    """
    A stored audio file.

    Attributes:
        filename: Bare filename, used in download URLs.
        path: Absolute path on disk.
        size_bytes: File size.
    """
    filename: str
    path: Path
    size_bytes: int


def sanitize_filename(name: str) -> str:
    """
    Strip directory components from a requested filename.

    Both ``/`` and ``\\`` separators are treated as directory separators.

    Examples:
        >>> sanitize_filename("../../etc/passwd")
        'passwd'
        >>> sanitize_filename("..\\\\secret.wav")
        'secret.wav'
        >>> sanitize_filename("..")
        ''
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if base in ("", ".", ".."):
        return ""
    return base


class AudioStore:
    """
    Append-only store for generated audio files.

    New files always get new names, so concurrent requests never write
    the same file and no locking is needed.
    """

    def __init__(self, base_dir: str, retention: Optional["AudioRetentionManager"] = None):
        self._base_dir = Path(base_dir)
        self._retention = retention

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def ensure_dir(self) -> Path:
        """Create the audio directory if it does not exist."""
        self._base_dir.mkdir(parents=True, exist_ok=True)
        return self._base_dir

    @staticmethod
    def make_filename(index: int, timestamp_ms: Optional[int] = None) -> str:
        """
        Build the filename for the ``index``-th payload of a response.

        Args:
            index: Payload position in the provider response.
            timestamp_ms: Epoch milliseconds; defaults to now.
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"tts_{timestamp_ms}_{index}{AUDIO_SUFFIX}"

    def save(self, filename: str, data: bytes) -> AudioArtifact:
        """
        Write an audio file atomically.

        Args:
            filename: Bare filename (directory components are rejected).
            data: Decoded audio bytes.

        Returns:
            AudioArtifact describing the written file.

        Raises:
            ValueError: If the filename contains directory components.
            OSError: If the write fails. Unlike a cache, a failed write
                here fails the request.
        """
        if sanitize_filename(filename) != filename:
            raise ValueError(f"Invalid audio filename: {filename!r}")

        base = self.ensure_dir()
        target = base / filename
        tmp = target.with_suffix(target.suffix + ".tmp")
        try:
            tmp.write_bytes(data)
            tmp.replace(target)
        finally:
            if tmp.exists():
                tmp.unlink()

        verbose(_LOG, "audio_saved", filename=filename, bytes=len(data))

        if self._retention is not None:
            self._retention.maybe_cleanup()

        return AudioArtifact(filename=filename, path=target.resolve(), size_bytes=len(data))

    def resolve(self, filename: str) -> Optional[Path]:
        """
        Resolve a requested filename to a stored file.

        Args:
            filename: Name from the download URL, possibly hostile.

        Returns:
            Path of an existing file inside the audio directory, or None.
        """
        safe = sanitize_filename(filename)
        if not safe:
            return None

        base = self._base_dir.resolve()
        candidate = (base / safe).resolve()
        if candidate.parent != base:
            warn(_LOG, "audio_path_outside_store", requested=filename)
            return None
        if not candidate.is_file():
            return None
        return candidate


class AudioRetentionManager:
    """
    TTL-based cleanup of generated audio files.

    Thread-safe; cleanup runs in a daemon thread so request handling is
    never blocked by directory scans.
    """

    def __init__(
        self,
        base_dir: str,
        ttl_seconds: int,
        cleanup_interval_seconds: int = 3600,
    ):
        self._base_dir = Path(base_dir)
        self._ttl_seconds = ttl_seconds
        self._cleanup_interval = cleanup_interval_seconds
        self._last_cleanup = 0.0
        self._lock = threading.Lock()
        self._cleanup_running = False

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def maybe_cleanup(self) -> None:
        """Start a background cleanup if the interval has elapsed."""
        now = time.time()
        with self._lock:
            if now - self._last_cleanup < self._cleanup_interval:
                return
            if self._cleanup_running:
                return
            self._cleanup_running = True
            self._last_cleanup = now

        threading.Thread(
            target=self._do_cleanup,
            daemon=True,
            name="audio-retention-cleanup",
        ).start()

    def force_cleanup(self) -> Dict[str, int]:
        """
        Run cleanup immediately (blocking).

        Returns:
            Dict with 'files_removed' and 'bytes_freed'
        """
        with self._lock:
            self._cleanup_running = True
        return self._do_cleanup()

    def _do_cleanup(self) -> Dict[str, int]:
        try:
            if not self._base_dir.exists():
                return {"files_removed": 0, "bytes_freed": 0}

            cutoff = time.time() - self._ttl_seconds
            files_removed = 0
            bytes_freed = 0
            errors = 0

            for wav_file in self._base_dir.glob(f"*{AUDIO_SUFFIX}"):
                try:
                    st = wav_file.stat()
                    if st.st_mtime < cutoff:
                        wav_file.unlink()
                        files_removed += 1
                        bytes_freed += st.st_size
                except OSError as e:
                    errors += 1
                    verbose(_LOG, "cleanup_file_error", file=str(wav_file), error=str(e))

            if files_removed > 0:
                info(
                    _LOG, "audio_cleanup",
                    files_removed=files_removed,
                    bytes_freed=bytes_freed,
                    errors=errors,
                )

            return {"files_removed": files_removed, "bytes_freed": bytes_freed}

        finally:
            with self._lock:
                self._cleanup_running = False
