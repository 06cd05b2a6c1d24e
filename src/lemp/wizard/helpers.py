"""Running the lemp-next-id and lemp-templates helper commands."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Dict, List, Optional, Union

from lemp.cli.config import CONFIG_ENV_VAR
from lemp.errors import HelperError


logger = logging.getLogger(__name__)


class HelperRunner:
    """Locates and runs helper commands, capturing their stdout."""

    def __init__(
        self,
        next_id: str = "lemp-next-id",
        templates: str = "lemp-templates",
        config_path: Optional[Union[str, Path]] = None,
    ):
        self.commands = {"next_id": next_id, "templates": templates}
        self.config_path = config_path
        self._paths: Dict[str, str] = {}

    def check(self) -> None:
        """Make sure every helper exists and is executable."""
        for key, command in self.commands.items():
            path = shutil.which(command)
            if not path or not os.access(path, os.X_OK):
                raise HelperError(f"FATAL: Required helper command '{command}' not found or not executable.")
            self._paths[key] = path

    def _run(self, key: str, *args: str) -> str:
        if key not in self._paths:
            self.check()
        cmd = [self._paths[key], *args]
        try:
            # stderr is not captured so helper diagnostics reach the operator
            result = subprocess.run(cmd, stdout=subprocess.PIPE, text=True, env=self._env())
        except OSError as e:
            raise HelperError(f"Failed to run {self.commands[key]}: {e}") from e
        if result.returncode != 0:
            raise HelperError(f"{self.commands[key]} exited with code {result.returncode}")
        return result.stdout

    def _env(self) -> Optional[Dict[str, str]]:
        """Child environment; helpers read the same settings file as the wizard."""
        if self.config_path is None:
            return None
        return dict(os.environ, **{CONFIG_ENV_VAR: str(Path(self.config_path).resolve())})

    def next_id(self) -> str:
        return self._run("next_id").strip()

    def templates(self, node: str, storage: str) -> List[str]:
        output = self._run("templates", node, storage)
        return [line.strip() for line in output.splitlines() if line.strip()]
