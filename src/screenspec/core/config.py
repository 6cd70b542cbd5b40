"""
Project configuration loaded from studio.config.json.

There is no module-level cache: `load_config` returns a fresh object that
callers pass explicitly through the pipeline.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE = "studio.config.json"

SUPPORTED_FRAMEWORKS = ("nextjs", "vue", "svelte", "html", "expo")

Framework = Literal["nextjs", "vue", "svelte", "html", "expo"]


class FontEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    family: str
    source: Literal["google", "local"]
    weights: list[str] | None = None
    files: list[str] | None = None


class StudioConfig(BaseModel):
    """
    Compiler configuration.

    Attributes:
        framework: Target backend name
        app_dir: Application root of the generated project
        components_dir: Directory of hand-written components
        generated_dir: Directory generated files are written to
        screens_dir: Directory holding *.screen.json documents
        schema_path: JSON Schema document used by the validator
        import_alias: Module prefix for imports in generated code (e.g. "@")
        component_library: Optional component library mapping (e.g. "shadcn")
        plugins: Node plugin references (`module:attr` or a .py path)
        tokens: Optional design token file
        fonts: Font declarations for the generated project
        components: Optional JSON file holding ComponentDef entries
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    framework: Framework
    app_dir: str
    components_dir: str
    generated_dir: str
    screens_dir: str
    schema_path: str
    import_alias: str
    component_library: str | None = None
    plugins: list[str] = Field(default_factory=list)
    tokens: str | None = None
    fonts: list[FontEntry] = Field(default_factory=list)
    components: str | None = None

    @field_validator(
        "app_dir",
        "components_dir",
        "generated_dir",
        "screens_dir",
        "schema_path",
        "import_alias",
    )
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must be a non-empty string")
        return value

    def resolve_path(self, root: Path, relative: str) -> Path:
        """Resolve a config-relative path against the project root."""
        return (root / relative).resolve()


def load_config(root: Path) -> StudioConfig:
    """
    Read studio.config.json from the project root.

    Args:
        root: Project root directory

    Returns:
        Parsed configuration

    Raises:
        ConfigError: If the file is missing, is not valid JSON, or has invalid fields
    """
    path = root / CONFIG_FILE
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(
            f"Config file not found at {path}. Create a {CONFIG_FILE} in the project root."
        ) from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE}: must contain a JSON object")

    try:
        config = StudioConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        raise ConfigError(f"{CONFIG_FILE}: {problems}") from e

    logger.debug(f"Loaded config from {path} (framework={config.framework})")
    return config
