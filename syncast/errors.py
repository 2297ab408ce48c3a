class SynCastError(Exception):
    """Base class for application errors."""


class ConfigError(SynCastError):
    """Folder configuration cannot be read or written. Fatal at startup."""


class FetchError(SynCastError):
    """A single feed could not be retrieved or parsed."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class PersistenceError(SynCastError):
    """History or favorites file could not be read or appended to."""


class PlaybackLaunchError(SynCastError):
    """The external player process could not be started."""
