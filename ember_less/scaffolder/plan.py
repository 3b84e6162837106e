"""Ordered file plan built up by the scaffolding steps.

Each step appends ``PlannedFile`` entries; :meth:`FilePlan.execute` then
applies them in insertion order.  The plan keeps no index of destinations, so
two steps planning the same path both run and the later one wins.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import ScaffoldIOError
from ..utils import print_created
from .templates import TemplateRenderer


class FileAction(str, Enum):
    MKDIR = "mkdir"
    COPY = "copy"
    TEMPLATE = "template"


@dataclass(frozen=True)
class PlannedFile:
    """One file operation: *source* is a template name, *destination* is project-relative."""

    action: FileAction
    source: str | None
    destination: str


@dataclass
class FilePlan:
    entries: list[PlannedFile] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def mkdir(self, destination: str) -> None:
        self.entries.append(PlannedFile(FileAction.MKDIR, None, destination))

    def copy(self, source: str, destination: str) -> None:
        self.entries.append(PlannedFile(FileAction.COPY, source, destination))

    def template(self, source: str, destination: str) -> None:
        self.entries.append(PlannedFile(FileAction.TEMPLATE, source, destination))

    def destinations(self, action: FileAction | None = None) -> list[str]:
        return [e.destination for e in self.entries if action is None or e.action == action]

    async def execute(
        self,
        root: Path,
        renderer: TemplateRenderer,
        context: dict[str, Any],
        *,
        verbose: bool = True,
    ) -> list[Path]:
        """Apply every planned operation under *root*, in order.

        Stops at the first failure.  Files already written stay on disk.

        Returns:
            The paths created or written.
        """
        written: list[Path] = []
        for entry in self.entries:
            target = root / entry.destination
            if entry.action is FileAction.MKDIR:
                await asyncio.to_thread(_mkdir, target)
            elif entry.action is FileAction.COPY:
                await renderer.copy_to_file(entry.source, target)
            else:
                await renderer.render_to_file(entry.source, target, context)
            if verbose:
                print_created(entry.action.value, entry.destination)
            written.append(target)
        return written


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ScaffoldIOError("mkdir", str(path), exc.strerror or str(exc)) from exc
