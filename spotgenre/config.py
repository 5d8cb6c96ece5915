"""
Configuration module for spotgenre.

All environment variables and configuration constants are defined here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

# Load .env file early so environment variables are available
load_dotenv(Path.cwd() / ".env")


def parse_bool_env(key: str, default: bool = False) -> bool:
    """Parse boolean environment variable."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def parse_int_env(key: str, default: int) -> int:
    """Parse integer environment variable, falling back to default on bad input."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def parse_float_env(key: str, default: float) -> float:
    """Parse float environment variable, falling back to default on bad input."""
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def parse_str_env(key: str, default: str) -> str:
    value = os.environ.get(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def require_env(key: str) -> str:
    """
    Get a required environment variable.

    Raises:
        ConfigurationError: If the variable is unset or empty
    """
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(f"Missing required environment variable: {key}")
    return value


# ============================================================================
# SPOTIFY API CONSTANTS
# ============================================================================

SCOPES = " ".join([
    "user-read-private",
    "user-read-email",
    "user-library-read",
    "playlist-modify-public",
    "playlist-modify-private",
])

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"

# Spotify API limits
LIKED_SONGS_PAGE_SIZE = 50
AUDIO_FEATURES_BATCH_SIZE = 100
PLAYLIST_ADD_CHUNK_SIZE = 100

# Values shipped in sample configs; treated as "not configured"
PLACEHOLDER_CLIENT_ID = "your_spotify_client_id"
PLACEHOLDER_CLIENT_SECRET = "your_spotify_client_secret"

# ============================================================================
# GENRE CLASSIFICATION CONSTANTS
# ============================================================================

GENRES = [
    "Pop", "Rock", "Hip-Hop", "Electronic", "Jazz",
    "Classical", "Country", "R&B", "Indie", "Alternative",
]
DEFAULT_GENRE = "Pop"

CLASSIFIER_STRATEGIES = ("features", "artist", "hybrid")

# ============================================================================
# PLAYLIST DEFAULTS
# ============================================================================

DEFAULT_PLAYLIST_TEMPLATE = "AI Generated - {genre}"
DEFAULT_DESCRIPTION_TEMPLATE = "Auto-generated {genre} playlist from your liked songs"

# Base delay after each successful API call (seconds)
DEFAULT_API_DELAY = 0.15


def _default_data_dir() -> Path:
    return Path(parse_str_env("SPOTGENRE_DATA_DIR", str(Path.cwd() / "data")))


def _default_api_delay() -> float:
    return parse_float_env("SPOTIFY_API_DELAY", DEFAULT_API_DELAY)


@dataclass
class Settings:
    """Runtime settings, normally built with ``Settings.from_env()``."""

    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    redirect_uri: str = DEFAULT_REDIRECT_URI
    refresh_token: Optional[str] = None
    data_dir: Path = field(default_factory=_default_data_dir)
    playlist_template: str = DEFAULT_PLAYLIST_TEMPLATE
    description_template: str = DEFAULT_DESCRIPTION_TEMPLATE
    playlist_public: bool = False
    classifier: str = "hybrid"
    mock_features: bool = True
    log_level: str = "INFO"
    api_delay: float = field(default_factory=_default_api_delay)

    def __post_init__(self):
        # Convert string paths to Path objects
        if isinstance(self.data_dir, str):
            self.data_dir = Path(self.data_dir)
        if self.classifier not in CLASSIFIER_STRATEGIES:
            raise ConfigurationError(
                f"Unknown classifier '{self.classifier}'. "
                f"Expected one of: {', '.join(CLASSIFIER_STRATEGIES)}"
            )

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            client_id=os.environ.get("SPOTIPY_CLIENT_ID"),
            client_secret=os.environ.get("SPOTIPY_CLIENT_SECRET"),
            redirect_uri=parse_str_env("SPOTIPY_REDIRECT_URI", DEFAULT_REDIRECT_URI),
            refresh_token=os.environ.get("SPOTIPY_REFRESH_TOKEN") or None,
            data_dir=_default_data_dir(),
            playlist_template=parse_str_env("SPOTGENRE_PLAYLIST_TEMPLATE", DEFAULT_PLAYLIST_TEMPLATE),
            description_template=parse_str_env(
                "SPOTGENRE_DESCRIPTION_TEMPLATE", DEFAULT_DESCRIPTION_TEMPLATE
            ),
            playlist_public=parse_bool_env("SPOTGENRE_PLAYLIST_PUBLIC", False),
            classifier=parse_str_env("SPOTGENRE_CLASSIFIER", "hybrid").lower(),
            mock_features=parse_bool_env("SPOTGENRE_MOCK_FEATURES", True),
            log_level=parse_str_env("SPOTGENRE_LOG_LEVEL", "INFO"),
            api_delay=_default_api_delay(),
        )

    @property
    def token_cache_path(self) -> Path:
        return self.data_dir / ".cache"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    def validate_credentials(self) -> None:
        """
        Ensure client credentials are present and not placeholder values.

        Raises:
            ConfigurationError: If credentials are missing or unconfigured
        """
        if not self.client_id or not self.client_secret:
            raise ConfigurationError(
                "Missing SPOTIPY_CLIENT_ID or SPOTIPY_CLIENT_SECRET. "
                "Set them in environment variables or .env file."
            )
        if self.client_id == PLACEHOLDER_CLIENT_ID or self.client_secret == PLACEHOLDER_CLIENT_SECRET:
            raise ConfigurationError(
                "Spotify credentials still hold placeholder values. "
                "Create an app at developer.spotify.com and set your own."
            )

    def playlist_name(self, genre: str) -> str:
        return self.playlist_template.format(genre=genre)

    def playlist_description(self, genre: str) -> str:
        return self.description_template.format(genre=genre)
