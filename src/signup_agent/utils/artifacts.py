"""Screenshot files written during a run."""

import time
from pathlib import Path
from typing import Optional, Union

from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)


class ScreenshotStore:
    """Names, creates and removes per-run screenshot files."""

    def __init__(self, directory: Union[str, Path] = "screenshots"):
        self.directory = Path(directory).resolve()
        self.logger = logger.bind(component="screenshot_store")

    def ensure_directory(self) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def new_path(self, prefix: str = "signup") -> Path:
        """Unique path for a new screenshot, e.g. ``signup-1718000000000.png``."""
        self.ensure_directory()
        path = self.directory / f"{prefix}-{int(time.time() * 1000)}.png"
        suffix = 1
        while path.exists():
            path = self.directory / f"{prefix}-{int(time.time() * 1000)}-{suffix}.png"
            suffix += 1
        return path

    def discard(self, path: Optional[Union[str, Path]]) -> bool:
        """Delete a screenshot; returns False if there was nothing to delete."""
        if path is None:
            return False

        path = Path(path)
        try:
            path.unlink()
        except FileNotFoundError:
            self.logger.debug("Screenshot already gone", path=str(path))
            return False

        self.logger.info("Screenshot discarded", path=str(path))
        return True
