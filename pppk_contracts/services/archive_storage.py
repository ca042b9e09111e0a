# pppk_contracts/services/archive_storage.py
from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

logger = logging.getLogger("pppk.archive")


def archive_path(ni_pppk: str) -> str:
    return f"archives/{ni_pppk}_FINAL.pdf"


class FileArchive:
    """Blob archive on the local filesystem; locators are file:// URIs."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _target(self, rel_path: str) -> Path:
        rel = PurePosixPath(rel_path)
        if rel.is_absolute() or ".." in rel.parts:
            raise ValueError(f"archive path must stay inside the archive: {rel_path}")
        return self.root.joinpath(*rel.parts)

    def store(self, rel_path: str, data: bytes) -> str:
        target = self._target(rel_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(target.suffix + ".part")
        tmp.write_bytes(data)
        tmp.replace(target)
        logger.info("archived %s (%d bytes)", rel_path, len(data))
        return target.resolve().as_uri()
