"""Ember + Less project scaffolder.

Quick usage::

    from ember_less.scaffolder import ScaffoldOrchestrator

    orchestrator = ScaffoldOrchestrator(config, options)
    ctx = await orchestrator.generate("/tmp/blog")
"""

from ember_less.scaffolder.document import HtmlDocument
from ember_less.scaffolder.generator import RunState, ScaffoldContext, ScaffoldOrchestrator, Step
from ember_less.scaffolder.plan import FileAction, FilePlan, PlannedFile
from ember_less.scaffolder.prompts import Question, build_questions, collect_answers
from ember_less.scaffolder.templates import TemplateRenderer

__all__ = [
    "FileAction",
    "FilePlan",
    "HtmlDocument",
    "PlannedFile",
    "Question",
    "RunState",
    "ScaffoldContext",
    "ScaffoldOrchestrator",
    "Step",
    "TemplateRenderer",
    "build_questions",
    "collect_answers",
]
