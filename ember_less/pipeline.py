"""ember-less run driver.

Drives one scaffolding run through its state machine::

    INIT -> CONFIGURE -> PLAN -> ENRICH -> WRITE -> DONE
                  (any failure)  -> FAILED

CONFIGURE collects and validates the answers, PLAN/ENRICH/WRITE execute the
orchestrator's ordered steps, and once the files are on disk the npm and
bower dependencies are installed unless ``--skip-install`` was given.  A
failed install is reported as a warning only: the project itself is complete
by then.

Usage::

    python -m ember_less ./my-app
    python -m ember_less ./my-app --coffee --karma --skip-install
    python -m ember_less ./my-app --answers answers.json
"""

from __future__ import annotations

import asyncio
import json
import sys
import time
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field
from rich.panel import Panel

from ember_less import __version__
from ember_less.config import GeneratorOptions, ProjectConfig
from ember_less.errors import InputValidationError, ScaffoldError
from ember_less.scaffolder.generator import RunState, ScaffoldContext, ScaffoldOrchestrator
from ember_less.scaffolder.prompts import (
    Asker,
    build_questions,
    collect_answers,
    default_ask,
    rich_ask,
)
from ember_less.scaffolder.templates import TemplateRenderer
from ember_less.utils import (
    console,
    derive_app_name,
    format_duration,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
    run_command,
)

INSTALL_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("npm", "install"),
    ("bower", "install"),
)


# ---------------------------------------------------------------------------
# Dependency installation
# ---------------------------------------------------------------------------


class CommandResult(BaseModel):
    command: str
    returncode: int
    stderr: str = ""


class InstallResult(BaseModel):
    """Outcome of the dependency-installation step."""

    skipped: bool = False
    success: bool = True
    commands: list[CommandResult] = Field(default_factory=list)

    @property
    def failures(self) -> list[CommandResult]:
        return [c for c in self.commands if c.returncode != 0]


async def install_dependencies(root: Path, timeout: int = 600) -> InstallResult:
    """Run ``npm install`` then ``bower install`` inside *root*.

    Both commands run even if the first fails; the result lists each exit
    status.  Nothing is retried.
    """
    result = InstallResult()
    for cmd in INSTALL_COMMANDS:
        console.print(f"  Running [bold]{' '.join(cmd)}[/bold]...")
        returncode, _stdout, stderr = await run_command(list(cmd), cwd=root, timeout=timeout)
        result.commands.append(
            CommandResult(command=" ".join(cmd), returncode=returncode, stderr=stderr)
        )
    result.success = not result.failures
    return result


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class Pipeline:
    """Runs configuration, generation and installation for one target directory.

    Attributes:
        options: Generator flags for this run.
        state: Mutable dictionary describing the run's progress and outcome.
        context: The orchestrator context, available once generation started.
    """

    def __init__(
        self,
        target: str | Path,
        options: GeneratorOptions | None = None,
        *,
        presets: dict[str, Any] | None = None,
        ask: Asker = rich_ask,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.target = Path(target)
        self.renderer = renderer
        self.options = options or GeneratorOptions()
        self.presets = presets or {}
        self.ask = ask
        self.context: ScaffoldContext | None = None
        self.state: dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "state": RunState.INIT.value,
            "steps_completed": [],
            "failed_step": None,
            "error": None,
            "install": None,
            "success": False,
        }

    @property
    def run_state(self) -> RunState:
        return RunState(self.state["state"])

    def _enter(self, state: RunState) -> None:
        self.state["state"] = state.value

    def _fail(self, step: str, exc: BaseException, *, show_traceback: bool = False) -> None:
        self._enter(RunState.FAILED)
        self.state["failed_step"] = step
        self.state["error"] = str(exc)
        print_error(f"Step '{step}' FAILED: {exc}")
        if show_traceback:
            console.print(f"[dim]{traceback.format_exc()}[/dim]")

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> dict[str, Any]:
        """Execute the whole run.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean and the ``install`` result.
        """
        run_start = time.monotonic()
        self._welcome()

        config = self.configure()
        if config is not None and await self.generate(config):
            self._enter(RunState.DONE)
            self.state["success"] = True
            await self.install()

        self.state["total_duration"] = format_duration(time.monotonic() - run_start)
        self.state["finished_at"] = datetime.now(timezone.utc).isoformat()
        self._print_final_summary()
        return self.state

    def configure(self) -> ProjectConfig | None:
        """Collect and validate the answers.  Returns ``None`` on invalid input."""
        self._enter(RunState.CONFIGURE)
        print_step_header(RunState.CONFIGURE.value, "answers")
        questions = build_questions(derive_app_name(self.target))
        try:
            config = collect_answers(questions, self.presets, self.ask)
        except InputValidationError as exc:
            self._fail("answers", exc)
            return None
        self.state["steps_completed"].append("answers")
        self.state["config"] = config.to_record()
        return config

    async def generate(self, config: ProjectConfig) -> bool:
        """Run every orchestrator step in order.  Returns ``False`` on failure."""
        orchestrator = ScaffoldOrchestrator(config, self.options, self.renderer)
        try:
            self.context = orchestrator.new_context(self.target)
        except ScaffoldError as exc:
            self._fail("load index template", exc)
            return False

        for step in orchestrator.steps():
            if step.state != self.run_state:
                self._enter(step.state)
            print_step_header(step.state.value, step.name)
            try:
                await step.run(self.context)
            except ScaffoldError as exc:
                self._fail(step.name, exc)
                return False
            except Exception as exc:
                self._fail(step.name, exc, show_traceback=True)
                return False
            self.state["steps_completed"].append(step.name)
        return True

    async def install(self) -> InstallResult:
        """Install npm/bower dependencies unless skipped.  Never raises on failure."""
        if self.options.skip_install:
            result = InstallResult(skipped=True)
            console.print(
                "\nSkipping dependency install. Run [bold]npm install & bower install[/bold] "
                "to install the required dependencies."
            )
        else:
            console.print("\nInstalling dependencies...")
            result = await install_dependencies(self.target, self.options.install_timeout)
            if result.success:
                print_success("Dependencies installed.")
            else:
                for failure in result.failures:
                    print_warning(
                        f"'{failure.command}' exited with {failure.returncode}: "
                        f"{failure.stderr or 'no output'}"
                    )
                print_warning("Project generated, but dependency installation failed.")
        self.state["install"] = result.model_dump()
        return result

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _welcome(self) -> None:
        console.print(
            Panel(
                f"[bold bright_cyan]ember-less[/bold bright_cyan] v{__version__}\n"
                f"Target  : {self.target.resolve()}\n"
                f"Scripts : {'CoffeeScript' if self.options.coffee else 'JavaScript'}\n"
                f"Tests   : {self.options.test_framework}"
                f"{' + karma' if self.options.karma else ''}",
                title="[bold]Ember + Less generator[/bold]",
                border_style="bright_cyan",
            )
        )

    def _print_final_summary(self) -> None:
        install = self.state.get("install") or {}
        if install.get("skipped"):
            install_text = "skipped"
        elif install:
            install_text = "ok" if install.get("success") else "failed"
        else:
            install_text = "-"
        written = len(self.context.written) if self.context else 0
        print_summary_table(
            {
                "State": self.state["state"],
                "Steps completed": str(len(self.state["steps_completed"])),
                "Files written": str(written),
                "Install": install_text,
                "Duration": self.state.get("total_duration", "-"),
            },
            title="ember-less",
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``ember-less`` / ``python -m ember_less``."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Scaffold an Ember.js + Less front-end project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  ember-less ./blog\n"
            "  ember-less ./blog --coffee --karma\n"
            "  ember-less ./blog --answers answers.json --skip-install\n"
        ),
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=".",
        help="Directory to generate the project in (default: current directory)",
    )
    parser.add_argument("--coffee", action="store_true", help="Generate CoffeeScript sources")
    parser.add_argument("--karma", action="store_true", help="Generate the Karma test harness")
    parser.add_argument(
        "--test-framework",
        default=None,
        help="Test framework wired into the Gruntfile (default: mocha)",
    )
    parser.add_argument(
        "--skip-install", action="store_true", help="Do not run npm/bower install"
    )
    parser.add_argument(
        "--answers",
        default=None,
        help="JSON file of preset answers (camelCase keys); those questions are not asked",
    )
    parser.add_argument(
        "--defaults",
        action="store_true",
        help="Answer every remaining question with its default",
    )

    args = parser.parse_args(argv)

    options = GeneratorOptions.from_env()
    updates: dict[str, Any] = {}
    if args.coffee:
        updates["coffee"] = True
    if args.karma:
        updates["karma"] = True
    if args.skip_install:
        updates["skip_install"] = True
    if args.test_framework:
        updates["test_framework"] = args.test_framework
    options = options.model_copy(update=updates)

    presets: dict[str, Any] = {}
    if args.answers:
        answers_path = Path(args.answers)
        try:
            presets = json.loads(answers_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            console.print(f"[bold red]Error:[/bold red] Cannot read answers file {answers_path}: {exc}")
            sys.exit(1)
        if not isinstance(presets, dict):
            console.print(f"[bold red]Error:[/bold red] Answers file must hold a JSON object: {answers_path}")
            sys.exit(1)

    pipeline = Pipeline(
        args.target,
        options,
        presets=presets,
        ask=default_ask if args.defaults else rich_ask,
    )
    result = asyncio.run(pipeline.run())

    if result.get("success"):
        console.print("[bold green]Project generated successfully![/bold green]")
    else:
        console.print("[bold red]Generation failed.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
