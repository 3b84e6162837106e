"""Main scaffolding orchestrator.

Takes a ``ProjectConfig`` plus ``GeneratorOptions`` and generates an
Ember.js + Less project: directory layout, static configuration files,
rendered source stubs and an ``index.html`` whose style and script bundles
depend on the chosen features.

The work is exposed as an explicit ordered list of :class:`Step` objects.
Every step receives the same :class:`ScaffoldContext`, which carries the
accumulated file plan, script manifest and HTML document between steps.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable

from .. import __version__
from ..config import CONFIG_FILENAME, GeneratorOptions, ModelLibrary, ProjectConfig
from ..errors import ScaffoldIOError
from ..utils import print_created
from .document import HtmlDocument
from .plan import FilePlan
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Script and style references
# ---------------------------------------------------------------------------

BASE_SCRIPTS: tuple[str, ...] = (
    "bower_components/console-polyfill/index.js",
    "bower_components/jquery/jquery.js",
    "bower_components/handlebars/handlebars.js",
    "bower_components/ember/ember.js",
)

MODEL_LIBRARY_SCRIPTS: dict[ModelLibrary, str] = {
    ModelLibrary.EMBER_DATA: "bower_components/ember-data-shim/ember-data.js",
    ModelLibrary.EMBER_MODEL: "bower_components/ember-model/ember-model.js",
}

BOOTSTRAP_PLUGINS: tuple[str, ...] = tuple(
    f"bower_components/bootstrap/js/{name}.js"
    for name in (
        "affix", "alert", "dropdown", "tooltip", "modal", "transition",
        "button", "popover", "carousel", "scrollspy", "collapse", "tab",
    )
)

EMBER_BOOTSTRAP_SCRIPTS: tuple[str, ...] = tuple(
    f"bower_components/ember-addons.bs_for_ember/dist/js/{name}.max.js"
    for name in (
        "bs-core", "bs-basic", "bs-alert", "bs-badge", "bs-button", "bs-label",
        "bs-list-group", "bs-modal", "bs-nav", "bs-progressbar",
        "bs-notifications", "bs-wizard",
    )
)

MAIN_STYLE_BUNDLE = "styles/main.css"
COMPONENTS_BUNDLE = "scripts/components.js"
PLUGINS_BUNDLE = "scripts/plugins.js"
BUILD_SEARCH_PATH = ".tmp"
BUILD_OUTPUTS: tuple[tuple[str, str], ...] = (
    ("scripts/templates.js", "scripts/compiled-templates.js"),
    ("scripts/main.js", "scripts/combined-scripts.js"),
)

APP_DIRECTORIES: tuple[str, ...] = (
    "app/templates",
    "app/styles",
    "app/images",
    "app/scripts",
    "app/scripts/models",
    "app/scripts/controllers",
    "app/scripts/routes",
    "app/scripts/views",
)

INDEX_TEMPLATE = "index.html"
INDEX_OUTPUT = "app/index.html"


# ---------------------------------------------------------------------------
# Run state and steps
# ---------------------------------------------------------------------------


class RunState(str, Enum):
    """Whole-run state machine.  Transitions only move forward."""

    INIT = "init"
    CONFIGURE = "configure"
    PLAN = "plan"
    ENRICH = "enrich"
    WRITE = "write"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ScaffoldContext:
    """Mutable state threaded through every step of one run."""

    root: Path
    config: ProjectConfig
    options: GeneratorOptions
    document: HtmlDocument
    bower_scripts: list[str] = field(default_factory=lambda: list(BASE_SCRIPTS))
    plan: FilePlan = field(default_factory=FilePlan)
    written: list[Path] = field(default_factory=list)

    def script_path(self, path: str) -> str:
        """Append the script extension selected by the options."""
        return f"{path}.{self.options.script_ext}"


StepFn = Callable[[ScaffoldContext], Awaitable[None]]


@dataclass(frozen=True)
class Step:
    name: str
    state: RunState
    run: StepFn


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


class ScaffoldOrchestrator:
    """Generates an Ember + Less project from resolved answers.

    Typical use::

        orchestrator = ScaffoldOrchestrator(config, GeneratorOptions(karma=True))
        ctx = await orchestrator.generate(Path("./my-app"))

    Callers that need per-step control (progress output, state tracking)
    iterate :meth:`steps` themselves and await each ``step.run(ctx)``.
    """

    def __init__(
        self,
        config: ProjectConfig,
        options: GeneratorOptions | None = None,
        renderer: TemplateRenderer | None = None,
        *,
        verbose: bool = True,
    ) -> None:
        self.config = config
        self.options = options or GeneratorOptions()
        self.renderer = renderer or TemplateRenderer()
        self.verbose = verbose

    # -- Public API --------------------------------------------------------

    def new_context(self, root: str | Path) -> ScaffoldContext:
        """Load the HTML template and return a fresh context for *root*."""
        document = HtmlDocument(self.renderer.read_source(INDEX_TEMPLATE))
        return ScaffoldContext(
            root=Path(root),
            config=self.config,
            options=self.options,
            document=document,
        )

    def steps(self) -> list[Step]:
        """Return the ordered steps of a run (everything after configuration)."""
        plan, enrich, write = RunState.PLAN, RunState.ENRICH, RunState.WRITE
        return [
            Step("directory layout", plan, self.plan_directories),
            Step("git", plan, self.plan_git),
            Step("bower", plan, self.plan_bower),
            Step("package file", plan, self.plan_package_file),
            Step("jshint", plan, self.plan_jshint),
            Step("tests", plan, self.plan_tests),
            Step("editorconfig", plan, self.plan_editor_config),
            Step("gruntfile", plan, self.plan_gruntfile),
            Step("templates", plan, self.plan_templates),
            Step("styles", plan, self.plan_styles),
            Step("app scripts", plan, self.plan_app_scripts),
            Step("router", plan, self.plan_router),
            Step("execute plan", plan, self.execute_plan),
            Step("style bundle", enrich, self.enrich_styles),
            Step("component scripts", enrich, self.enrich_scripts),
            Step("build outputs", enrich, self.enrich_build_outputs),
            Step("bootstrap plugins", enrich, self.enrich_bootstrap_plugins),
            Step("ember bootstrap", enrich, self.enrich_ember_bootstrap),
            Step("index.html", write, self.write_index),
            Step("configuration", write, self.save_config),
        ]

    async def generate(self, root: str | Path) -> ScaffoldContext:
        """Run every step in order against *root* and return the final context."""
        ctx = self.new_context(root)
        for step in self.steps():
            await step.run(ctx)
        return ctx

    # -- Context building --------------------------------------------------

    def build_context(self) -> dict[str, Any]:
        """Build the Jinja2 template context from the answers and options."""
        cfg = self.config
        return {
            "project_name": cfg.name,
            "ember_model_lib": cfg.ember_model_lib.value,
            "less_bootstrap": cfg.less_bootstrap,
            "ember_bootstrap": cfg.ember_bootstrap,
            "less_bootswatch": cfg.less_bootswatch,
            "use_rsync": cfg.use_rsync,
            "deploy_server": cfg.deploy_server,
            "deploy_user": cfg.deploy_user,
            "deploy_dir": cfg.deploy_dir,
            "coffee": self.options.coffee,
            "karma": self.options.karma,
            "test_framework": self.options.test_framework,
            "script_ext": self.options.script_ext,
            "generator_version": __version__,
        }

    # -- Plan: layout and static files -------------------------------------

    async def plan_directories(self, ctx: ScaffoldContext) -> None:
        for directory in APP_DIRECTORIES:
            ctx.plan.mkdir(directory)

    async def plan_git(self, ctx: ScaffoldContext) -> None:
        ctx.plan.copy("gitignore", ".gitignore")
        ctx.plan.copy("gitattributes", ".gitattributes")

    async def plan_bower(self, ctx: ScaffoldContext) -> None:
        ctx.plan.copy("bowerrc", ".bowerrc")
        ctx.plan.copy("_bower.json", "bower.json")

    async def plan_package_file(self, ctx: ScaffoldContext) -> None:
        ctx.plan.copy("_package.json", "package.json")

    async def plan_jshint(self, ctx: ScaffoldContext) -> None:
        ctx.plan.copy("_jshintrc", ".jshintrc")

    async def plan_editor_config(self, ctx: ScaffoldContext) -> None:
        ctx.plan.copy("editorconfig", ".editorconfig")

    async def plan_templates(self, ctx: ScaffoldContext) -> None:
        ctx.plan.copy("hbs/application.hbs", "app/templates/application.hbs")
        ctx.plan.copy("hbs/index.hbs", "app/templates/index.hbs")

    async def plan_styles(self, ctx: ScaffoldContext) -> None:
        if ctx.config.less_bootstrap:
            ctx.plan.copy("styles/style_bootstrap.less", "app/styles/style.less")
        else:
            ctx.plan.copy("styles/normalize.css", "app/styles/normalize.css")
            ctx.plan.copy("styles/style.css", "app/styles/style.css")

    # -- Plan: rendered files ----------------------------------------------

    async def plan_tests(self, ctx: ScaffoldContext) -> None:
        """Plan the Karma harness; skipped entirely unless ``karma`` is set."""
        if not ctx.options.karma:
            return
        ctx.plan.mkdir("test")
        ctx.plan.mkdir("test/support")
        ctx.plan.mkdir("test/integration")
        ctx.plan.copy("karma.conf.js", "karma.conf.js")
        ctx.plan.template(
            ctx.script_path("test/initializer") + ".j2",
            ctx.script_path("test/support/initializer"),
        )
        ctx.plan.template(
            ctx.script_path("test/integration/index") + ".j2",
            ctx.script_path("test/integration/index"),
        )

    async def plan_gruntfile(self, ctx: ScaffoldContext) -> None:
        ctx.plan.template("Gruntfile.js.j2", "Gruntfile.js")

    async def plan_app_scripts(self, ctx: ScaffoldContext) -> None:
        for name in ("app", "store", "routes/application_route"):
            ctx.plan.template(
                ctx.script_path(f"scripts/{name}") + ".j2",
                ctx.script_path(f"app/scripts/{name}"),
            )

    async def plan_router(self, ctx: ScaffoldContext) -> None:
        ctx.plan.template(
            ctx.script_path("scripts/router") + ".j2",
            ctx.script_path("app/scripts/router"),
        )

    async def execute_plan(self, ctx: ScaffoldContext) -> None:
        written = await ctx.plan.execute(
            ctx.root, self.renderer, self.build_context(), verbose=self.verbose
        )
        ctx.written.extend(written)

    # -- Enrich: index.html ------------------------------------------------

    async def enrich_styles(self, ctx: ScaffoldContext) -> None:
        if ctx.config.less_bootstrap:
            sources = ["styles/style.css"]
        else:
            sources = ["styles/normalize.css", "styles/style.css"]
        ctx.document.append_styles(MAIN_STYLE_BUNDLE, sources)

    async def enrich_scripts(self, ctx: ScaffoldContext) -> None:
        ctx.bower_scripts.append(MODEL_LIBRARY_SCRIPTS[ctx.config.ember_model_lib])
        ctx.document.append_scripts(COMPONENTS_BUNDLE, ctx.bower_scripts)

    async def enrich_build_outputs(self, ctx: ScaffoldContext) -> None:
        for bundle, source in BUILD_OUTPUTS:
            ctx.document.append_files("js", bundle, [source], search_path=BUILD_SEARCH_PATH)

    async def enrich_bootstrap_plugins(self, ctx: ScaffoldContext) -> None:
        if not ctx.config.less_bootstrap:
            return
        ctx.document.append_scripts(PLUGINS_BUNDLE, BOOTSTRAP_PLUGINS)

    async def enrich_ember_bootstrap(self, ctx: ScaffoldContext) -> None:
        # Bootstrap for Ember needs Bootstrap itself
        if not ctx.config.less_bootstrap or not ctx.config.ember_bootstrap:
            return
        ctx.document.append_scripts(PLUGINS_BUNDLE, EMBER_BOOTSTRAP_SCRIPTS)

    # -- Write -------------------------------------------------------------

    async def write_index(self, ctx: ScaffoldContext) -> None:
        out = await self.renderer.write_file(ctx.root / INDEX_OUTPUT, str(ctx.document))
        if self.verbose:
            print_created("write", INDEX_OUTPUT)
        ctx.written.append(out)

    async def save_config(self, ctx: ScaffoldContext) -> None:
        """Persist the answers to ``.yo-rc.json`` in the project root."""
        try:
            out = await asyncio.to_thread(ctx.config.save, ctx.root)
        except OSError as exc:
            target = str(ctx.root / CONFIG_FILENAME)
            raise ScaffoldIOError("write", target, exc.strerror or str(exc)) from exc
        except ValueError as exc:
            # Existing .yo-rc.json is malformed
            target = str(ctx.root / CONFIG_FILENAME)
            raise ScaffoldIOError("read", target, str(exc)) from exc
        if self.verbose:
            print_created("write", CONFIG_FILENAME)
        ctx.written.append(out)
