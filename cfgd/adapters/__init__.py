"""Adapters — bindings to external programs and the filesystem.

Public re-exports for convenient access.
"""

from cfgd.adapters.base import CommandRunner
from cfgd.adapters.mock import MockCommandRunner
from cfgd.adapters.shell.command import ShellCommandRunner
from cfgd.adapters.shell.filesystem import ArtifactWriter

__all__ = [
    "ArtifactWriter",
    "CommandRunner",
    "MockCommandRunner",
    "ShellCommandRunner",
]
