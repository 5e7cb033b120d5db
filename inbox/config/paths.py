"""Application paths configuration."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppPaths:
    config_path: Path

    @classmethod
    def default(cls) -> "AppPaths":
        config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )

        return cls(config_path=config_home / "inbox-reader" / "settings.yml")
