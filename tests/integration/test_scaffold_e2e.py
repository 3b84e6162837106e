"""Integration tests for complete project generation.

These tests drive the full pipeline (answers, plan, enrich, write) into a
temporary directory and check that the generated project is well formed:
JSON files parse, the index has the expected usemin blocks and every script
it references through the Gruntfile build exists.

No external tools (npm, bower, grunt) are required.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from ember_less.config import GeneratorOptions, ProjectConfig
from ember_less.pipeline import Pipeline
from ember_less.scaffolder import HtmlDocument
from ember_less.scaffolder.prompts import default_ask


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def _run(target: Path, presets: dict[str, Any], **options: Any) -> dict[str, Any]:
    pipeline = Pipeline(
        target,
        GeneratorOptions(skip_install=True, **options),
        presets=presets,
        ask=default_ask,
    )
    return await pipeline.run()


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestGeneratedProject:
    """Validate the files of a freshly generated project."""

    async def test_json_files_parse(self, project_dir: Path, full_answers):
        state = await _run(project_dir, full_answers)
        assert state["success"] is True
        for rel in ("bower.json", "package.json", ".bowerrc", ".jshintrc", ".yo-rc.json"):
            json.loads((project_dir / rel).read_text())

    async def test_index_bundles(self, project_dir: Path, full_answers):
        await _run(project_dir, full_answers)
        doc = HtmlDocument.from_file(project_dir / "app" / "index.html")
        assert [(kind, bundle) for kind, bundle, _ in doc.bundles()] == [
            ("css", "styles/main.css"),
            ("js", "scripts/components.js"),
            ("js", "scripts/templates.js"),
            ("js", "scripts/main.js"),
            ("js", "scripts/plugins.js"),
            ("js", "scripts/plugins.js"),
        ]
        html = str(doc)
        assert html.index("styles/main.css") < html.index("</head>")
        assert html.rindex("endbuild") < html.index("</body>")

    async def test_bower_declares_every_component(self, project_dir: Path, full_answers):
        await _run(project_dir, full_answers)
        bower = json.loads((project_dir / "bower.json").read_text())
        packages = set(bower["dependencies"])
        doc = HtmlDocument.from_file(project_dir / "app" / "index.html")
        for src in doc.sources("js"):
            if src.startswith("bower_components/"):
                assert src.split("/")[1] in packages, src

    async def test_coffee_karma_project(self, project_dir: Path, full_answers):
        state = await _run(project_dir, full_answers, coffee=True, karma=True)
        assert state["success"] is True
        gruntfile = (project_dir / "Gruntfile.js").read_text()
        assert "coffee: {" in gruntfile
        assert "configFile: 'karma.conf.js'" in gruntfile
        assert (project_dir / "test" / "integration" / "index.coffee").is_file()

    async def test_regeneration_is_idempotent(self, project_dir: Path, full_answers):
        await _run(project_dir, full_answers)
        first = (project_dir / "app" / "index.html").read_text()
        await _run(project_dir, full_answers)
        assert (project_dir / "app" / "index.html").read_text() == first

    async def test_saved_answers_reload(self, project_dir: Path, full_answers):
        await _run(project_dir, full_answers)
        saved = ProjectConfig.load(project_dir)
        state = await _run(project_dir, saved.to_record())
        assert state["config"] == saved.to_record()
