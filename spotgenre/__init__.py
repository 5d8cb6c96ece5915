"""
spotgenre - Sort your Spotify liked songs into genre playlists.

Fetches your saved tracks, enriches them with audio features and artist
genres, assigns each one a genre label and creates a playlist per genre.

Usage:
    from spotgenre import GenreOrganizer

    org = GenreOrganizer.from_env(progress=True)
    org.run(create=False)
    print(org.summary())
    org.create_all_playlists()
"""

from .config import GENRES, SCOPES, Settings
from .errors import (
    AuthenticationError,
    ConfigurationError,
    FetchError,
    PlaylistCreationError,
    RateLimitError,
    SpotgenreError,
)
from .classify import (
    GenreClassifier,
    classify_by_artist_genres,
    classify_by_features,
    mock_features,
)
from .export import export_table
from .organizer import GenreOrganizer
from .playlists import PlaylistRunResult
from .progress import Progress, ProgressTracker, Status

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "GenreOrganizer",
    # Configuration
    "Settings",
    "GENRES",
    "SCOPES",
    # Classification
    "GenreClassifier",
    "classify_by_features",
    "classify_by_artist_genres",
    "mock_features",
    # Progress
    "Progress",
    "ProgressTracker",
    "Status",
    # Results and utilities
    "PlaylistRunResult",
    "export_table",
    # Errors
    "SpotgenreError",
    "ConfigurationError",
    "AuthenticationError",
    "FetchError",
    "PlaylistCreationError",
    "RateLimitError",
]
