"""Tests for the question sequence and answer collection.

Covers:
- Question order and defaults
- Conditional deploy questions
- Presets, filters and the asker callable
- Validation failures become InputValidationError
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from ember_less.config import ModelLibrary
from ember_less.errors import InputValidationError
from ember_less.scaffolder.prompts import (
    Question,
    build_questions,
    collect_answers,
    default_ask,
    rich_ask,
)

pytestmark = pytest.mark.unit


class TestBuildQuestions:
    def test_order(self):
        names = [q.name for q in build_questions("blog")]
        assert names == [
            "name",
            "emberModelLib",
            "lessBootstrap",
            "emberBootstrap",
            "lessBootswatch",
            "useRsync",
            "deployServer",
            "deployUser",
            "deployDir",
        ]

    def test_name_default(self):
        assert build_questions("my blog")[0].default == "my blog"

    def test_confirms_default_true(self):
        confirms = [q for q in build_questions("blog") if q.type == "confirm"]
        assert len(confirms) == 4
        assert all(q.default is True for q in confirms)

    def test_model_library_defaults_to_first_choice(self):
        question = build_questions("blog")[1]
        assert question.default_answer() == "Ember-Data"
        assert question.filter("Ember-Model") == "ember-model"

    def test_deploy_questions_conditional(self):
        deploy = build_questions("blog")[-3:]
        assert all(q.when({"useRsync": True}) for q in deploy)
        assert not any(q.when({"useRsync": False}) for q in deploy)


class TestCollectAnswers:
    def test_defaults(self):
        config = collect_answers(build_questions("blog"), ask=default_ask)
        assert config.name == "blog"
        assert config.ember_model_lib is ModelLibrary.EMBER_DATA
        assert config.less_bootstrap and config.ember_bootstrap and config.less_bootswatch
        assert config.use_rsync is True
        assert config.deploy_server == "my-server.com"
        assert config.deploy_user == "myusername"
        assert config.deploy_dir == "/my/server/path/to-deploy-folder/"

    def test_presets_skip_asking(self, full_answers):
        ask = MagicMock()
        config = collect_answers(build_questions("ignored"), full_answers, ask)
        ask.assert_not_called()
        assert config.name == "my blog"
        assert config.deploy_user == "deployer"

    def test_rsync_off_skips_deploy_questions(self):
        asked: list[str] = []

        def ask(question: Question):
            asked.append(question.name)
            return question.default_answer()

        config = collect_answers(build_questions("blog"), {"useRsync": False}, ask)
        assert "deployServer" not in asked
        assert "useRsync" not in asked
        assert config.use_rsync is False
        assert config.deploy_server is None

    def test_filter_applied_to_presets(self):
        config = collect_answers(
            build_questions("blog"), {"emberModelLib": "Ember-Model"}, default_ask
        )
        assert config.ember_model_lib is ModelLibrary.EMBER_MODEL

    def test_unknown_model_library(self):
        with pytest.raises(InputValidationError) as exc_info:
            collect_answers(build_questions("blog"), {"emberModelLib": "backbone"}, default_ask)
        assert exc_info.value.errors
        assert "emberModelLib" in str(exc_info.value)

    def test_empty_name(self):
        with pytest.raises(InputValidationError, match="name"):
            collect_answers(build_questions("blog"), {"name": ""}, default_ask)

    def test_empty_deploy_detail(self):
        with pytest.raises(InputValidationError, match="deploy_dir"):
            collect_answers(build_questions("blog"), {"deployDir": ""}, default_ask)


class TestRichAsk:
    def test_confirm(self):
        question = build_questions("blog")[2]
        with patch("ember_less.scaffolder.prompts.Confirm.ask", return_value=False) as confirm:
            assert rich_ask(question) is False
        assert confirm.call_args.kwargs["default"] is True

    def test_list(self):
        question = build_questions("blog")[1]
        with patch("ember_less.scaffolder.prompts.Prompt.ask", return_value="Ember-Model") as prompt:
            assert rich_ask(question) == "Ember-Model"
        assert prompt.call_args.kwargs["choices"] == ["Ember-Data", "Ember-Model"]
        assert prompt.call_args.kwargs["default"] == "Ember-Data"

    def test_input(self):
        question = build_questions("blog")[0]
        with patch("ember_less.scaffolder.prompts.Prompt.ask", return_value="shop") as prompt:
            assert rich_ask(question) == "shop"
        assert prompt.call_args.kwargs["default"] == "blog"
