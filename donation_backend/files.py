import logging
import re
import shutil
import time
from pathlib import Path
from typing import BinaryIO, Optional

from donation_backend.errors import StoreError

logger = logging.getLogger(__name__)

WHITESPACE = re.compile(r"\s+")


def stored_filename(original: str, timestamp_ms: Optional[int] = None) -> str:
    """Name an upload ``<ms since epoch>-<filename>`` with whitespace runs as underscores."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    # Browsers on Windows may send the full client path
    basename = Path(original.replace("\\", "/")).name
    return f"{timestamp_ms}-{WHITESPACE.sub('_', basename)}"


class PhotoStore:
    def __init__(self, upload_dir: str):
        self.upload_dir = Path(upload_dir)

    def ensure_directory(self):
        if not self.upload_dir.exists():
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            logger.info(f"Uploads folder created at {self.upload_dir}")

    def save(self, filename: str, stream: BinaryIO) -> str:
        """Copy an uploaded file to disk and return the path it was stored at."""
        target = self.upload_dir / stored_filename(filename)
        try:
            with open(target, "wb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            raise StoreError(f"Could not store upload {filename!r}: {exc}") from exc
        return str(target)
