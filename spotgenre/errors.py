"""Exception types raised by spotgenre."""


class SpotgenreError(Exception):
    """Base class for all spotgenre errors."""
    pass


class ConfigurationError(SpotgenreError):
    """Exception for configuration-related errors."""
    pass


class AuthenticationError(SpotgenreError):
    """Raised when the OAuth flow or token exchange fails."""
    pass


class FetchError(SpotgenreError):
    """Raised when user data cannot be retrieved from Spotify."""
    pass


class PlaylistCreationError(SpotgenreError):
    """Raised when a genre playlist cannot be created or filled."""

    def __init__(self, genre: str):
        self.genre = genre
        super().__init__(f"Failed to create {genre} playlist")


class RateLimitError(SpotgenreError):
    """Raised when max retries exceeded for rate-limited API call."""
    pass
