import logging
import subprocess
from typing import List, Optional

from syncast.errors import PlaybackLaunchError
from syncast.utils.settings import get_setting


logger = logging.getLogger(__name__)


class PlayerLauncher:
    """Starts the external media player detached from the terminal session."""

    def __init__(self, command: Optional[str] = None):
        self.command = command or get_setting('player_command') or 'mpv'

    def argv(self, url: str) -> List[str]:
        return [self.command, url]

    def launch(self, url: str) -> subprocess.Popen:
        argv = self.argv(url)
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            raise PlaybackLaunchError(f"Cannot start {argv[0]}: {e}") from e
        logger.info("Started player pid=%s for %s", proc.pid, url)
        return proc
