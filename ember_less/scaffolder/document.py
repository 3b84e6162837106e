"""In-memory model of the generated ``index.html``.

The document is plain text with two insertion points: style blocks go just
before ``</head>`` and script blocks just before ``</body>``.  Every append
wraps its references in a usemin build block so the generated Gruntfile can
concatenate them into one bundle::

    <!-- build:js scripts/components.js -->
    <script src="bower_components/jquery/jquery.js"></script>
    <!-- endbuild -->

Appends never look at what is already present: calling the same append twice
yields two identical blocks.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

_INDENT = "    "


class HtmlDocument:
    """Mutable HTML text with usemin-style bundle insertion."""

    def __init__(self, html: str) -> None:
        self.html = html

    @classmethod
    def from_file(cls, path: str | Path) -> "HtmlDocument":
        return cls(Path(path).read_text(encoding="utf-8"))

    def __str__(self) -> str:
        return self.html

    # -- Public appenders --------------------------------------------------

    def append_styles(self, bundle: str, sources: Sequence[str]) -> None:
        """Append a CSS build block named *bundle* before ``</head>``."""
        self.append_files("css", bundle, sources)

    def append_scripts(self, bundle: str, sources: Sequence[str]) -> None:
        """Append a JS build block named *bundle* before ``</body>``."""
        self.append_files("js", bundle, sources)

    def append_files(
        self,
        file_type: str,
        bundle: str,
        sources: Sequence[str],
        attrs: dict[str, str] | None = None,
        search_path: str | Sequence[str] | None = None,
    ) -> None:
        """Append a build block of *file_type* (``js`` or ``css``).

        Args:
            file_type: ``"js"`` for script tags, ``"css"`` for stylesheet links.
            bundle: Output path of the optimized bundle.
            sources: Source paths, emitted in the given order.
            attrs: Extra attributes added to each tag.
            search_path: Directory (or directories) usemin searches for the
                sources, e.g. ``".tmp"`` for build intermediates.
        """
        extra = "".join(f' {k}="{v}"' for k, v in (attrs or {}).items())
        if file_type == "js":
            tags = [f'<script{extra} src="{src}"></script>' for src in sources]
            tag_name = "body"
        elif file_type == "css":
            tags = [f'<link rel="stylesheet"{extra} href="{src}">' for src in sources]
            tag_name = "head"
        else:
            raise ValueError(f"Unsupported file type: {file_type!r}")

        block = generate_block(file_type, bundle, tags, search_path)
        self.html = _insert_before_closing(self.html, tag_name, block)

    # -- Inspection --------------------------------------------------------

    def bundles(self, file_type: str | None = None) -> list[tuple[str, str, list[str]]]:
        """Return ``(file_type, bundle, sources)`` for every build block, in order."""
        found = []
        for match in _BLOCK_RE.finditer(self.html):
            kind, bundle, body = match.group("type"), match.group("bundle"), match.group("body")
            if file_type is not None and kind != file_type:
                continue
            found.append((kind, bundle, _SOURCE_RE.findall(body)))
        return found

    def sources(self, file_type: str) -> list[str]:
        """Flatten every referenced source of *file_type* in document order."""
        return [src for _, _, srcs in self.bundles(file_type) for src in srcs]


_BLOCK_RE = re.compile(
    r"<!-- build:(?P<type>\w+)(?:\([^)]*\))? (?P<bundle>\S+) -->(?P<body>.*?)<!-- endbuild -->",
    re.DOTALL,
)
_SOURCE_RE = re.compile(r'(?:src|href)="([^"]+)"')


def generate_block(
    file_type: str,
    bundle: str,
    tags: Sequence[str],
    search_path: str | Sequence[str] | None = None,
) -> str:
    """Build one usemin block from already-rendered tags."""
    if search_path is None:
        search = ""
    elif isinstance(search_path, str):
        search = f"({search_path})"
    else:
        search = "({" + ",".join(search_path) + "})"

    lines = [f"<!-- build:{file_type}{search} {bundle} -->"]
    lines.extend(tags)
    lines.append("<!-- endbuild -->")
    return "\n".join(_INDENT + line for line in lines)


def _insert_before_closing(html: str, tag_name: str, block: str) -> str:
    """Insert *block* on its own lines right before ``</tag_name>``."""
    pattern = re.compile(rf"\s*</{tag_name}>", re.IGNORECASE)
    match = pattern.search(html)
    if match is None:
        raise ValueError(f"Document has no </{tag_name}> insertion point")
    return html[: match.start()] + "\n" + block + "\n" + f"</{tag_name}>" + html[match.end():]
