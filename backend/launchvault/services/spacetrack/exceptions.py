class SpaceTrackAPIError(Exception):
    """Base exception for Space-Track API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SpaceTrackAuthError(SpaceTrackAPIError):
    """Authentication failed or session missing."""

    pass
