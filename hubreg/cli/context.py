"""
Per-invocation state handed to hubreg commands through Click's ctx.obj.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path


@dataclass
class HubregContext:
    """Where the command runs and whether it may prompt.

    Attributes:
        cwd: Directory configuration is looked up from
        is_interactive: stdin is a TTY, so a missing password can be prompted for
    """

    cwd: Path
    is_interactive: bool

    @classmethod
    def create(cls, cwd: Path | None = None) -> HubregContext:
        return cls(cwd=cwd or Path.cwd(), is_interactive=sys.stdin.isatty())

    @property
    def start_dir(self) -> str:
        """cwd as the string the config functions expect."""
        return str(self.cwd)
