"""
Filesystem adapter — artifact writes, stale-file removal, directories.

Provides a receipt-returning interface for every filesystem side effect
of a reconciliation pass. All writes are full-replace: the target is
truncated and rewritten, never appended to or merged.
"""

from __future__ import annotations

import logging
from pathlib import Path

from cfgd.core.models.action import ErrorKind, Receipt
from cfgd.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """File and directory operations with receipts. Never raises."""

    @property
    def name(self) -> str:
        return "filesystem"

    def write(self, path: str | Path, content: str) -> Receipt:
        """Truncate ``path`` and write ``content`` (UTF-8)."""
        target = Path(path)
        try:
            with target.open("w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.error("Cannot write %s: %s", target, e.strerror or e)
            return Receipt.failure(
                step="write",
                target=str(target),
                error=f"Cannot write {target}: {e.strerror or e}",
                error_kind=ErrorKind.WRITE_FAILED,
            )

        logger.debug("Written %d bytes to %s", len(content), target)
        return Receipt.success(
            step="write",
            target=str(target),
            output=f"Written {len(content)} bytes to {target}",
            metadata={"size": len(content)},
        )

    def write_file(self, generated: GeneratedFile) -> Receipt:
        receipt = self.write(generated.path, generated.content)
        if generated.reason:
            receipt.metadata["reason"] = generated.reason
        return receipt

    def remove_matching(self, directory: str | Path, pattern: str) -> Receipt:
        """Delete every file in ``directory`` matching the glob ``pattern``."""
        root = Path(directory)
        target = str(root / pattern)
        removed: list[str] = []

        try:
            for path in sorted(root.glob(pattern)):
                if path.is_file() or path.is_symlink():
                    path.unlink()
                    removed.append(path.name)
        except OSError as e:
            logger.error("Cannot remove %s: %s", target, e.strerror or e)
            return Receipt.failure(
                step="remove",
                target=target,
                error=f"Cannot remove {target}: {e.strerror or e}",
                error_kind=ErrorKind.WRITE_FAILED,
                metadata={"removed": removed},
            )

        if removed:
            logger.debug("Removed %d stale artifact(s) from %s", len(removed), root)
        return Receipt.success(
            step="remove",
            target=target,
            output=f"Removed {len(removed)} file(s)",
            metadata={"removed": removed},
        )

    def ensure_dir(self, path: str | Path) -> Receipt:
        """Create ``path`` (and parents) if absent."""
        target = Path(path)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create directory %s: %s", target, e.strerror or e)
            return Receipt.failure(
                step="mkdir",
                target=str(target),
                error=f"Cannot create directory {target}: {e.strerror or e}",
                error_kind=ErrorKind.WRITE_FAILED,
            )
        return Receipt.success(step="mkdir", target=str(target))
