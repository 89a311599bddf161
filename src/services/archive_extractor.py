# src/services/archive_extractor.py
from __future__ import annotations

import io
import logging
import os
import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import List, Union

from src.models.deployment import ArchiveEntry
from src.models.errors import ExtractionError

logger = logging.getLogger(__name__)

ArchiveSource = Union[bytes, str, os.PathLike]


def _open(source: ArchiveSource) -> zipfile.ZipFile:
    try:
        if isinstance(source, (bytes, bytearray)):
            return zipfile.ZipFile(io.BytesIO(source))
        return zipfile.ZipFile(source)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Could not open archive: {e}") from e


def _safe_relative(name: str) -> PurePosixPath:
    """Normalize an entry name to a relative path that stays inside the target dir."""
    rel = PurePosixPath(name.replace("\\", "/"))
    if rel.is_absolute() or ".." in rel.parts:
        raise ExtractionError(f"Refusing to extract entry outside target directory: {name}")
    return rel


def reset_directory(path: Union[str, os.PathLike]) -> Path:
    """Remove a scratch directory with everything under it and recreate it empty."""
    target = Path(path)
    if target.exists():
        shutil.rmtree(target)
    target.mkdir(parents=True)
    return target


class ArchiveExtractor:
    """Reads zip archives from bytes or a local path."""

    def list_entries(self, source: ArchiveSource) -> List[ArchiveEntry]:
        with _open(source) as zf:
            try:
                return [
                    ArchiveEntry(
                        name=info.filename,
                        is_dir=info.is_dir(),
                        data=b"" if info.is_dir() else zf.read(info),
                    )
                    for info in zf.infolist()
                ]
            except (zipfile.BadZipFile, OSError) as e:
                raise ExtractionError(f"Could not read archive entries: {e}") from e

    def find_entry(self, source: ArchiveSource, entry_name: str) -> bool:
        with _open(source) as zf:
            return entry_name in zf.namelist()

    def extract(self, source: ArchiveSource, entry_name: str, dest_dir: Union[str, os.PathLike]) -> Path:
        """
        Extract a single named entry to dest_dir and return where it landed.
        The entry is written as raw bytes; a nested archive can then be opened on its own.
        """
        with _open(source) as zf:
            try:
                info = zf.getinfo(entry_name)
            except KeyError as e:
                raise ExtractionError(f"{entry_name} not found in archive") from e
            target = Path(dest_dir) / _safe_relative(info.filename)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            except (zipfile.BadZipFile, OSError) as e:
                raise ExtractionError(f"Could not extract {entry_name}: {e}") from e
        logger.info("Extracted %s to %s", entry_name, target)
        return target

    def extract_all(self, source: ArchiveSource, dest_dir: Union[str, os.PathLike]) -> List[ArchiveEntry]:
        """Extract every file entry under dest_dir, skipping directory entries."""
        dest = Path(dest_dir)
        extracted: List[ArchiveEntry] = []
        with _open(source) as zf:
            for info in zf.infolist():
                logger.info(f"Processing entry {info.filename}")
                if info.is_dir():
                    continue
                rel = _safe_relative(info.filename)
                target = dest / rel
                try:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    data = zf.read(info)
                    target.write_bytes(data)
                except (zipfile.BadZipFile, OSError) as e:
                    raise ExtractionError(f"Could not extract {info.filename}: {e}") from e
                extracted.append(ArchiveEntry(name=rel.as_posix(), is_dir=False, data=data))
        return extracted
