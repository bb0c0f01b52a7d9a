"""
FileChat Core - File Storage.

Raw upload bytes on local disk under ``<upload_dir>/<user_id>/``.
Validation (extension whitelist, size ceiling) happens here so nothing
is written for a rejected file.
"""

import logging
import re
import time
from pathlib import Path

from filechat.exceptions import FileTooLargeException, UnsupportedFileTypeException

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


def get_file_extension(filename: str) -> str:
    """Lower-cased extension without the dot ('' if none)."""
    return Path(filename).suffix.lower().lstrip(".")


class FileStorage:
    """Save, read and delete uploaded file blobs."""

    def __init__(self, base_dir: Path, allowed_extensions: list[str], max_size_bytes: int):
        self.base_dir = Path(base_dir)
        self.allowed_extensions = [ext.lower() for ext in allowed_extensions]
        self.max_size_bytes = max_size_bytes

    def user_directory(self, user_id: int) -> Path:
        user_dir = self.base_dir / str(user_id)
        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    def is_valid_file_type(self, filename: str) -> bool:
        return get_file_extension(filename) in self.allowed_extensions

    def validate(self, filename: str, size_bytes: int) -> str:
        """
        Check extension and size. Returns the extension.

        Raises:
            UnsupportedFileTypeException: extension not whitelisted
            FileTooLargeException: size above the ceiling
        """
        extension = get_file_extension(filename)
        if not self.is_valid_file_type(filename):
            raise UnsupportedFileTypeException(extension or filename, self.allowed_extensions)
        if size_bytes > self.max_size_bytes:
            raise FileTooLargeException(size_bytes, self.max_size_bytes)
        return extension

    def save(self, user_id: int, filename: str, content: bytes) -> Path:
        """Validate, then write bytes to a timestamped safe filename."""
        self.validate(filename, len(content))

        safe_name = f"{int(time.time() * 1000)}_{_UNSAFE_CHARS.sub('_', filename)}"
        file_path = self.user_directory(user_id) / safe_name
        file_path.write_bytes(content)

        logger.info(f"Saved file: {filename} -> {file_path} ({len(content)} bytes)")
        return file_path

    def delete(self, file_path: str | Path) -> bool:
        path = Path(file_path)
        if not path.exists():
            logger.warning(f"Delete skipped, file already gone: {path}")
            return False
        path.unlink()
        logger.info(f"Deleted file: {path}")
        return True
