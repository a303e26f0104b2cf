"""On-disk storage for exported program PDFs.

Files live at ``<root>/<user_id>/<user_program_id>.pdf``; the relative
path is what gets stored on the ``user_programs`` row.
"""

import logging
import re
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from fitcoach.configs.config import get_storage_config
from fitcoach.configs.system import StorageConfig

logger = logging.getLogger(__name__)

_SAFE_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class PdfStorage:
    def __init__(self, root: Path) -> None:
        self._root = root

    @staticmethod
    def relative_path(user_id: str, user_program_id: str) -> str:
        for value in (user_id, user_program_id):
            if not _SAFE_ID_RE.match(value):
                raise ValueError(f"Unsafe storage id: {value!r}")
        return f"{user_id}/{user_program_id}.pdf"

    def _resolve(self, relative: str) -> Path:
        path = (self._root / relative).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise ValueError(f"Path escapes storage root: {relative!r}")
        return path

    def save(self, user_id: str, user_program_id: str, data: bytes) -> str:
        """Write *data* and return its storage path."""
        relative = self.relative_path(user_id, user_program_id)
        path = self._resolve(relative)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug("Stored PDF %s (%d bytes)", relative, len(data))
        return relative

    def read(self, relative: str) -> bytes | None:
        path = self._resolve(relative)
        return path.read_bytes() if path.is_file() else None

    def delete(self, relative: str) -> None:
        self._resolve(relative).unlink(missing_ok=True)


def get_pdf_storage(
    config: Annotated[StorageConfig, Depends(get_storage_config)],
) -> PdfStorage:
    return PdfStorage(Path(config.pdf_dir))
