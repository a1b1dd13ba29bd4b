import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from promption.constants import (
    APP_DIRNAME,
    DATABASE_ENV_VAR,
    DATABASE_FILENAME,
)


def default_config_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_DIRNAME


def default_db_path(env: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if env is None else env
    override = env.get(DATABASE_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return default_config_dir(env) / DATABASE_FILENAME


@dataclass(frozen=True)
class PromptionPaths:
    db_path: Path
    project_root: Path

    @classmethod
    def resolve(
        cls,
        db_path: Optional[Path] = None,
        project_root: Optional[Path] = None,
    ) -> "PromptionPaths":
        return cls(
            db_path=(db_path.expanduser() if db_path else default_db_path()),
            project_root=(project_root or Path.cwd()),
        )
