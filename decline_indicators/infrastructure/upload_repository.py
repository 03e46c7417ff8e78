"""Infrastructure adapter for reading uploaded indicator files from disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

from decline_indicators.config import MAX_UPLOAD_FILES, UPLOAD_EXTENSION

logger = logging.getLogger(__name__)

UploadPair = Tuple[str, Union[str, bytes]]


class UploadValidationError(ValueError):
    """Raised when an upload batch breaks the file-count or file-type rules."""


def select_uploads(
    pairs: Sequence[UploadPair],
    max_files: int = MAX_UPLOAD_FILES,
    extension: str = UPLOAD_EXTENSION,
) -> List[UploadPair]:
    """Validate a batch and collapse duplicate filenames to the last content supplied."""
    if len(pairs) > max_files:
        raise UploadValidationError(f"Maximum of {max_files} files allowed")
    invalid = [name for name, _ in pairs if not name.lower().endswith(extension.lower())]
    if invalid:
        raise UploadValidationError(f"Only {extension} files are accepted: {invalid}")

    unique: Dict[str, Union[str, bytes]] = {}
    for name, content in pairs:
        unique[name] = content
    return list(unique.items())


def discover_uploads(directory: Path, extension: str = UPLOAD_EXTENSION) -> List[Path]:
    if not directory.is_dir():
        return []
    return sorted(path for path in directory.iterdir() if path.is_file() and path.suffix.lower() == extension)


def load_uploads(paths: Sequence[Path]) -> List[UploadPair]:
    pairs: List[UploadPair] = []
    for path in paths:
        payload = path.read_bytes()
        logger.debug("Read upload file=%s bytes=%s", path.name, len(payload))
        pairs.append((path.name, payload))
    return select_uploads(pairs)
