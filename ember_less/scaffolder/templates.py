"""Jinja2 template rendering and verbatim copying for project scaffolding.

Provides the TemplateRenderer class which loads templates from the
``ember_less/scaffolder/templates/`` directory.  Files ending in ``.j2`` are
rendered with the project context; every other file is copied byte for byte.
Any missing source or unwritable destination surfaces as a
:class:`~ember_less.errors.ScaffoldIOError`.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from ..errors import ScaffoldIOError


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates and copies static assets.

    Template names are paths relative to the template directory, e.g.
    ``"scripts/app.js.j2"`` or ``"hbs/index.hbs"``.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["classify"] = _classify_filter

    # -- Single template rendering -----------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Raises:
            ScaffoldIOError: If the template does not exist.
        """
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as exc:
            raise ScaffoldIOError("render", template_path, "template not found") from exc
        return template.render(**context)

    def read_source(self, template_path: str) -> str:
        """Return the raw text of a template file without rendering it."""
        source = self.template_dir / template_path
        try:
            return source.read_text(encoding="utf-8")
        except OSError as exc:
            raise ScaffoldIOError("read", template_path, exc.strerror or str(exc)) from exc

    # -- File-based operations (async) -------------------------------------

    async def render_to_file(
        self,
        template_path: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.  Returns the output path.
        """
        content = self.render(template_path, context)
        return await self.write_file(output_path, content)

    async def write_file(self, output_path: str | Path, content: str) -> Path:
        """Write already-rendered *content* to *output_path*."""
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    async def copy_to_file(self, template_path: str, output_path: str | Path) -> Path:
        """Copy a static template to *output_path* without any substitution."""
        source = self.template_dir / template_path
        if not source.is_file():
            raise ScaffoldIOError("copy", template_path, "template not found")
        out = Path(output_path)
        await asyncio.to_thread(_copy_file, source, out)
        return out


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _classify_filter(value: str) -> str:
    """Convert ``my blog`` or ``my-blog`` to the namespace ``MyBlog``."""
    parts = re.split(r"[^a-zA-Z0-9]+", value)
    name = "".join(word[:1].upper() + word[1:] for word in parts if word)
    if not name or name[0].isdigit():
        name = "App" + name
    return name


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ScaffoldIOError("write", str(path), exc.strerror or str(exc)) from exc


def _copy_file(source: Path, dest: Path) -> None:
    """Synchronous helper: create parent dirs and copy bytes."""
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, dest)
    except OSError as exc:
        raise ScaffoldIOError("copy", str(dest), exc.strerror or str(exc)) from exc
