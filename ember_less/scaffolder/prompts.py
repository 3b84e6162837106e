"""Question sequence that produces a ``ProjectConfig``.

Questions are asked in order.  A question with a ``when`` predicate is only
asked if the predicate holds for the answers collected so far; this is how
the deploy-detail questions stay hidden unless rsync deployment was chosen.

The actual terminal interaction is delegated to an *asker* callable so the
sequence can run interactively (Rich prompts), from preset answers, or from
defaults alone.
"""

from __future__ import annotations

from typing import Any, Callable, Literal

from pydantic import BaseModel, ValidationError
from rich.prompt import Confirm, Prompt

from ..config import ProjectConfig
from ..errors import InputValidationError
from ..utils import console

Asker = Callable[["Question"], Any]


class Question(BaseModel):
    """A single prompt in the configuration sequence."""

    name: str
    type: Literal["input", "list", "confirm"] = "input"
    message: str
    default: Any = None
    choices: list[str] = []
    filter: Callable[[Any], Any] | None = None
    when: Callable[[dict[str, Any]], bool] | None = None

    def default_answer(self) -> Any:
        if self.default is None and self.type == "list" and self.choices:
            return self.choices[0]
        return self.default


def _wants_rsync(answers: dict[str, Any]) -> bool:
    return bool(answers.get("useRsync"))


def build_questions(default_name: str) -> list[Question]:
    """Return the ordered question list for a new project."""
    return [
        Question(
            name="name",
            type="input",
            message="Your project name",
            default=default_name,
        ),
        Question(
            name="emberModelLib",
            type="list",
            message="Which model/store library do you want to use?",
            choices=["Ember-Data", "Ember-Model"],
            filter=lambda v: v.lower() if isinstance(v, str) else v,
        ),
        Question(
            name="lessBootstrap",
            type="confirm",
            message="Would you like to include Twitter Bootstrap 3.0.0?",
            default=True,
        ),
        Question(
            name="emberBootstrap",
            type="confirm",
            message="Would you like to include Ember-components Bootstrap for Ember?",
            default=True,
        ),
        Question(
            name="lessBootswatch",
            type="confirm",
            message="Would you like to include Bootswatch templates for Bootstrap 3.0.0?",
            default=True,
        ),
        Question(
            name="useRsync",
            type="confirm",
            message="Would you like to use rsync deployment to server using SSH?",
            default=True,
        ),
        Question(
            name="deployServer",
            type="input",
            message="Your project deployment server full URL",
            default="my-server.com",
            when=_wants_rsync,
        ),
        Question(
            name="deployUser",
            type="input",
            message="Your project deployment SSH / Rsync username",
            default="myusername",
            when=_wants_rsync,
        ),
        Question(
            name="deployDir",
            type="input",
            message="Your project deployment absolute path",
            default="/my/server/path/to-deploy-folder/",
            when=_wants_rsync,
        ),
    ]


# ---------------------------------------------------------------------------
# Askers
# ---------------------------------------------------------------------------


def rich_ask(question: Question) -> Any:
    """Ask *question* on the terminal using Rich prompts."""
    if question.type == "confirm":
        return Confirm.ask(question.message, default=bool(question.default), console=console)
    if question.type == "list":
        return Prompt.ask(
            question.message,
            choices=question.choices,
            default=question.default_answer(),
            console=console,
        )
    return Prompt.ask(question.message, default=question.default, console=console)


def default_ask(question: Question) -> Any:
    """Answer every question with its default."""
    return question.default_answer()


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------


def collect_answers(
    questions: list[Question],
    presets: dict[str, Any] | None = None,
    ask: Asker = rich_ask,
) -> ProjectConfig:
    """Run the question sequence and validate the result.

    Args:
        questions: Ordered questions, usually from :func:`build_questions`.
        presets: Answers supplied up front; matching questions are not asked.
        ask: Callable that obtains an answer for one question.

    Raises:
        InputValidationError: If the collected answers do not form a valid
            ``ProjectConfig``.
    """
    presets = presets or {}
    answers: dict[str, Any] = {}
    for question in questions:
        if question.when is not None and not question.when(answers):
            continue
        if question.name in presets:
            value = presets[question.name]
        else:
            value = ask(question)
        if question.filter is not None:
            value = question.filter(value)
        answers[question.name] = value

    try:
        return ProjectConfig.model_validate(answers)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'answers'}: {err['msg']}"
            for err in exc.errors()
        )
        raise InputValidationError(
            f"Invalid answers: {details}", exc.errors(include_url=False)
        ) from exc
