"""Storage for synthesized speech clips."""
import asyncio
import logging
import os
import re
import tempfile
import uuid
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from app.services.errors import StorageError

logger = logging.getLogger(__name__)

ARTIFACT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


class AudioArtifact(BaseModel):
    """A stored clip reachable by Twilio at ``public_url``."""

    id: str
    data: bytes = Field(repr=False)
    public_url: str
    path: Path


class AudioArtifactStore:
    """Writes clips to a directory served under ``/audio/<id>``."""

    def __init__(self, directory: str, base_url: str, extension: str = "mp3"):
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")
        self.extension = extension

    def ensure_directory(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def _file_path(self, artifact_id: str) -> Path:
        return self.directory / f"{artifact_id}.{self.extension}"

    def _write(self, artifact_id: str, data: bytes) -> Path:
        self.ensure_directory()
        target = self._file_path(artifact_id)
        # Write then rename, so the file is either absent or complete
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return target

    async def store(self, data: bytes) -> AudioArtifact:
        """
        Persist a clip under a fresh id.

        Returns only once the file is fully written, since its URL is handed
        to Twilio straight away.

        Raises:
            StorageError: If the file could not be written
        """
        artifact_id = uuid.uuid4().hex
        try:
            path = await asyncio.to_thread(self._write, artifact_id, data)
        except OSError as e:
            raise StorageError(f"Could not write audio artifact {artifact_id}: {str(e)}") from e

        artifact = AudioArtifact(
            id=artifact_id,
            data=data,
            public_url=f"{self.base_url}/audio/{artifact_id}",
            path=path,
        )
        logger.info(f"[AUDIO STORE] Stored artifact {artifact_id} ({len(data)} bytes)")
        return artifact

    def path_for(self, artifact_id: str) -> Optional[Path]:
        """Location of a stored clip, or None for unknown or malformed ids."""
        if not ARTIFACT_ID_PATTERN.match(artifact_id):
            return None
        path = self._file_path(artifact_id)
        if not path.is_file():
            return None
        return path
