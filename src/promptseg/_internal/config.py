"""Prompt configuration: TOML file -> validated models.

The file is optional. Keys are merged onto the defaults one at a time, so
a typo or a bad value costs only that key:

    command_timeout = 1000

    [nodejs]
    symbol = "node "
    not_capable_style = "bold yellow"
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from promptseg.kernel.probe import ProbeSpec

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROMPTSEG_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/promptseg.toml")

ModelT = TypeVar("ModelT", bound=BaseModel)


class NodejsConfig(BaseModel):
    """Presentation and detection options for the Node.js segment."""
    format: str = "via [$symbol$version]($style) "
    symbol: str = "⬢ "
    style: str = "bold green"
    not_capable_style: str = "bold red"  # used when engines.node is not satisfied
    disabled: bool = False
    detect_files: List[str] = Field(default_factory=lambda: ["package.json", ".node-version"])
    detect_extensions: List[str] = Field(default_factory=lambda: ["js", "mjs", "cjs", "ts"])
    detect_folders: List[str] = Field(default_factory=lambda: ["node_modules"])
    exclude_folders: List[str] = Field(default_factory=lambda: ["esy.lock"])

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("detect_extensions")
    @classmethod
    def strip_leading_dots(cls, v: List[str]) -> List[str]:
        """Accept ".js" as well as "js"."""
        return [ext[1:] if ext.startswith(".") else ext for ext in v]

    def probe_spec(self) -> ProbeSpec:
        return ProbeSpec.build(
            file_names=self.detect_files,
            extensions=self.detect_extensions,
            folder_names=self.detect_folders,
            exclusion_folder_names=self.exclude_folders,
        )


class PromptConfig(BaseModel):
    """Root configuration."""
    command_timeout: int = Field(2000, gt=0)  # milliseconds
    nodejs: NodejsConfig = Field(default_factory=NodejsConfig)

    model_config = ConfigDict(extra="forbid", frozen=True)


def _merge(model: Type[ModelT], table: Mapping[str, Any], section: str) -> Dict[str, Any]:
    """Keep the keys of `table` that `model` accepts, warning about the rest."""
    accepted: Dict[str, Any] = {}
    for key, value in table.items():
        if key not in model.model_fields:
            logger.warning(f"Unknown key `{key}` in [{section}] configuration, ignoring it")
            continue
        try:
            model.model_validate({key: value})
        except ValidationError as e:
            reason = e.errors()[0].get("msg", str(e))
            logger.warning(f"Invalid value for `{key}` in [{section}] configuration ({reason}), using default")
            continue
        accepted[key] = value
    return accepted


def config_from_dict(data: Mapping[str, Any]) -> PromptConfig:
    """Build a PromptConfig from parsed TOML, degrading bad keys to defaults."""
    nodejs_table = data.get("nodejs", {})
    if not isinstance(nodejs_table, dict):
        logger.warning("Configuration key `nodejs` must be a table, using defaults")
        nodejs_table = {}
    root = _merge(PromptConfig, {k: v for k, v in data.items() if k != "nodejs"}, "root")
    nodejs = NodejsConfig(**_merge(NodejsConfig, nodejs_table, "nodejs"))
    return PromptConfig(nodejs=nodejs, **root)


def resolve_config_path(path: Optional[Union[str, os.PathLike]] = None) -> Path:
    """Explicit path, then $PROMPTSEG_CONFIG, then ~/.config/promptseg.toml."""
    if path is not None:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Optional[Union[str, os.PathLike]] = None) -> PromptConfig:
    """Load the prompt configuration.

    A missing file yields the defaults. An unreadable or syntactically
    invalid file is reported at warning level and also yields the defaults.
    """
    config_path = resolve_config_path(path)
    if not config_path.is_file():
        logger.debug(f"No configuration at {config_path}, using defaults")
        return PromptConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Could not load configuration from {config_path}: {e}")
        return PromptConfig()
    return config_from_dict(data)
