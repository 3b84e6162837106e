"""ember-less configuration.

Two typed records drive a scaffolding run:

* ``ProjectConfig`` -- the answers collected from the user (project name,
  model library, feature toggles, deploy details).  It is persisted alongside
  the generated project in ``.yo-rc.json`` so a later run can recover it.
* ``GeneratorOptions`` -- the command-line flags that shape the output
  (CoffeeScript sources, Karma harness, test framework, dependency install).

Both are Pydantic v2 models so invalid input is rejected at construction time.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

CONFIG_FILENAME = ".yo-rc.json"
CONFIG_NAMESPACE = "generator-ember-less"

DEPLOY_FIELDS: tuple[str, ...] = ("deploy_server", "deploy_user", "deploy_dir")


class ModelLibrary(str, Enum):
    """Model/store library wired into the generated application."""

    EMBER_DATA = "ember-data"
    EMBER_MODEL = "ember-model"


class ProjectConfig(BaseModel):
    """Resolved answers for one generated project.

    Field aliases keep the camelCase keys used in ``.yo-rc.json`` and in
    preset answer files; Python code uses the snake_case names.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, description="Project name")
    ember_model_lib: ModelLibrary = Field(
        default=ModelLibrary.EMBER_DATA, alias="emberModelLib"
    )
    less_bootstrap: bool = Field(default=True, alias="lessBootstrap")
    ember_bootstrap: bool = Field(default=True, alias="emberBootstrap")
    less_bootswatch: bool = Field(default=True, alias="lessBootswatch")
    use_rsync: bool = Field(default=False, alias="useRsync")
    deploy_server: str | None = Field(default=None, alias="deployServer")
    deploy_user: str | None = Field(default=None, alias="deployUser")
    deploy_dir: str | None = Field(default=None, alias="deployDir")

    @field_validator("ember_model_lib", mode="before")
    @classmethod
    def _lowercase_model_lib(cls, value: Any) -> Any:
        # The prompt offers "Ember-Data" / "Ember-Model"
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def _check_deploy_fields(self) -> "ProjectConfig":
        present = [f for f in DEPLOY_FIELDS if getattr(self, f) is not None]
        if self.use_rsync:
            missing = [f for f in DEPLOY_FIELDS if not getattr(self, f)]
            if missing:
                raise ValueError(
                    f"rsync deployment enabled but missing: {', '.join(missing)}"
                )
        elif present:
            raise ValueError(
                f"deploy fields set while rsync deployment is disabled: {', '.join(present)}"
            )
        return self

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        """Return the camelCase record persisted in ``.yo-rc.json``."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def save(self, root: Path) -> Path:
        """Write the answers into ``<root>/.yo-rc.json``.

        Keys stored there by other generators are preserved.

        Returns:
            Path of the written file.

        Raises:
            ValueError: If an existing file is not a JSON object.
        """
        target = Path(root) / CONFIG_FILENAME
        existing: dict[str, Any] = {}
        if target.exists():
            existing = json.loads(target.read_text(encoding="utf-8"))
            if not isinstance(existing, dict):
                raise ValueError(f"{CONFIG_FILENAME} does not hold a JSON object")
        existing[CONFIG_NAMESPACE] = self.to_record()
        target.write_text(json.dumps(existing, indent=2) + "\n", encoding="utf-8")
        return target

    @classmethod
    def load(cls, root: Path) -> "ProjectConfig":
        """Load answers previously persisted under *root*.

        Raises:
            FileNotFoundError: If no ``.yo-rc.json`` exists.
            KeyError: If the file holds no ember-less section.
        """
        raw = json.loads((Path(root) / CONFIG_FILENAME).read_text(encoding="utf-8"))
        return cls.model_validate(raw[CONFIG_NAMESPACE])


class GeneratorOptions(BaseModel):
    """Command-line flags for a scaffolding run."""

    coffee: bool = Field(default=False, description="Emit CoffeeScript instead of JavaScript")
    test_framework: str = Field(default="mocha", min_length=1)
    karma: bool = Field(default=False, description="Generate the Karma test harness")
    skip_install: bool = Field(default=False, description="Skip npm/bower install")
    install_timeout: int = Field(
        default=600, ge=30, description="Dependency install timeout in seconds"
    )

    @property
    def script_ext(self) -> str:
        """File extension of generated script sources."""
        return "coffee" if self.coffee else "js"

    @classmethod
    def from_env(cls) -> "GeneratorOptions":
        """Build options from environment variables.

        Recognised variables (all optional):
            EMBER_LESS_COFFEE, EMBER_LESS_TEST_FRAMEWORK, EMBER_LESS_KARMA,
            EMBER_LESS_SKIP_INSTALL, EMBER_LESS_INSTALL_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        for env_name, field in (
            ("EMBER_LESS_COFFEE", "coffee"),
            ("EMBER_LESS_KARMA", "karma"),
            ("EMBER_LESS_SKIP_INSTALL", "skip_install"),
        ):
            if os.environ.get(env_name):
                kwargs[field] = _env_flag(os.environ[env_name])
        if os.environ.get("EMBER_LESS_TEST_FRAMEWORK"):
            kwargs["test_framework"] = os.environ["EMBER_LESS_TEST_FRAMEWORK"]
        if os.environ.get("EMBER_LESS_INSTALL_TIMEOUT"):
            kwargs["install_timeout"] = int(os.environ["EMBER_LESS_INSTALL_TIMEOUT"])
        return cls(**kwargs)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
