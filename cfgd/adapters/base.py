"""
Adapter base — the contract between renderers and external programs.

Renderers never spawn processes themselves; they hand an argument
vector to a CommandRunner and get a Receipt back. Swapping the runner
(real, mock) is how tests and ``--mock`` mode avoid touching the host.
"""

from __future__ import annotations

import shlex
from abc import ABC, abstractmethod
from collections.abc import Sequence

from cfgd.core.models.action import Receipt


class CommandRunner(ABC):
    """Abstract base class for command runners.

    Runners execute a program with an argument vector and return a
    Receipt. They NEVER raise — a non-zero exit or a spawn failure is a
    failed Receipt, and the caller decides how much it matters.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self, program: str) -> bool:
        """Check whether ``program`` can be executed. Should never raise."""

    @abstractmethod
    def run(self, argv: Sequence[str]) -> Receipt:
        """Run ``argv[0]`` with the remaining elements as arguments.

        MUST never raise exceptions.
        """

    def run_template(self, template: str, **values: object) -> Receipt:
        """Build an argv from a trusted template, then run it.

        The template is split into tokens first and each token is
        formatted on its own, so a substituted value always stays one
        argument no matter what characters it contains::

            runner.run_template("ip neigh replace {ip} lladdr {mac}", ip=..., mac=...)
        """
        argv = [token.format(**values) for token in shlex.split(template)]
        return self.run(argv)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
