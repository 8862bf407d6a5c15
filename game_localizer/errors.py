"""
Exceptions raised by the localization pipeline.
"""


class LocalizerError(Exception):
    """Base exception for all game localizer errors"""
    pass


class FetchError(LocalizerError):
    """Raised when a URL cannot be fetched (non-200 status or network failure)"""

    def __init__(self, url: str, status: int = None, message: str = None):
        self.url = url
        self.status = status
        if message is None:
            if status is not None:
                message = f"HTTP {status} for {url}"
            else:
                message = f"Request failed for {url}"
        super().__init__(message)


class NotIframeGameError(LocalizerError):
    """Raised when a game's index.html has no iframe to localize"""

    reason = "not-iframe"

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"{game_id}: not an iframe game")


class NoBackupError(LocalizerError):
    """Raised when restoring a game that has no index.html backup"""

    reason = "no-backup"

    def __init__(self, game_id: str):
        self.game_id = game_id
        super().__init__(f"{game_id}: no backup found")
