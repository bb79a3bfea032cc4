"""Local disk storage for uploaded photos."""

import logging
from pathlib import Path

from cars_api.exceptions import InvalidPhotoError

logger = logging.getLogger(__name__)


class PhotoStorage:
    """Writes photos to ``<base_dir>/<kind>/<owner_id>/<filename>``."""

    def __init__(self, base_dir: str | Path):
        self.base_dir = Path(base_dir)

    def save(self, kind: str, owner_id: int, filename: str | None, content: bytes) -> str:
        """Store a photo and return its path.

        Raises:
            InvalidPhotoError: if the file name is unusable or the write fails.
        """
        # Keep only the final path component so uploads cannot escape base_dir
        name = Path(filename or "").name
        if not name or name in (".", ".."):
            raise InvalidPhotoError()

        path = self.base_dir / kind / str(owner_id) / name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to write photo for {kind} {owner_id}: {e}")
            raise InvalidPhotoError() from e

        logger.info(f"Stored photo for {kind} {owner_id} at {path}")
        return str(path)
