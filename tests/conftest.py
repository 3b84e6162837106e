"""Shared pytest fixtures for the ember-less test suite.

Provides reusable fixtures for:
- Answer records covering the main feature combinations
- Generator options that never touch the network
- A copy of the template directory that tests may damage
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any

import pytest

from ember_less.config import GeneratorOptions, ProjectConfig
from ember_less.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

@pytest.fixture
def full_answers() -> dict[str, Any]:
    """Every feature on, rsync deploy configured (camelCase keys)."""
    return {
        "name": "my blog",
        "emberModelLib": "Ember-Data",
        "lessBootstrap": True,
        "emberBootstrap": True,
        "lessBootswatch": True,
        "useRsync": True,
        "deployServer": "deploy.example.com",
        "deployUser": "deployer",
        "deployDir": "/srv/www/blog/",
    }


@pytest.fixture
def bootstrap_config(full_answers) -> ProjectConfig:
    """Bootstrap, Bootstrap for Ember, Bootswatch and rsync all enabled."""
    return ProjectConfig.model_validate(full_answers)


@pytest.fixture
def plain_config() -> ProjectConfig:
    """No Bootstrap, Ember Model, no deployment."""
    return ProjectConfig(
        name="plain",
        ember_model_lib="ember-model",
        less_bootstrap=False,
        ember_bootstrap=False,
        less_bootswatch=False,
        use_rsync=False,
    )


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

@pytest.fixture
def options() -> GeneratorOptions:
    """Default options without dependency installation."""
    return GeneratorOptions(skip_install=True)


@pytest.fixture
def karma_options() -> GeneratorOptions:
    return GeneratorOptions(karma=True, skip_install=True)


@pytest.fixture
def coffee_karma_options() -> GeneratorOptions:
    return GeneratorOptions(coffee=True, karma=True, skip_install=True)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@pytest.fixture
def template_copy(tmp_path: Path) -> Path:
    """A private copy of the bundled templates that a test may modify."""
    source = TemplateRenderer().template_dir
    dest = tmp_path / "templates-copy"
    shutil.copytree(source, dest)
    yield dest


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Target directory for a generated project (not created in advance)."""
    return tmp_path / "my-blog"
