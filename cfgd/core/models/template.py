"""
Generated file model — produced by every artifact renderer.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """An artifact rendered from configuration, not yet written.

    Attributes:
        path:    Absolute destination path.
        content: Full file content (replaces whatever is on disk).
        reason:  Which configuration domain produced it.
    """

    path: str
    content: str
    reason: str = ""
