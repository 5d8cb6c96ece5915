"""
Playlist creation utilities.

Functions for creating one playlist per genre bucket and filling it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import spotipy

from .config import PLAYLIST_ADD_CHUNK_SIZE, Settings
from .errors import PlaylistCreationError
from .logging_utils import get_logger
from .progress import ProgressTracker
from .ratelimit import api_call, chunked


@dataclass
class PlaylistRunResult:
    """Outcome of create_all_playlists."""

    created: Dict[str, str] = field(default_factory=dict)  # genre -> playlist id
    failed: Dict[str, str] = field(default_factory=dict)  # genre -> message
    planned: Dict[str, int] = field(default_factory=dict)  # genre -> track count (dry run)

    @property
    def ok(self) -> bool:
        return not self.failed


def track_uris(tracks: List[dict]) -> List[str]:
    """URIs of saved-track items, skipping entries without one (local files)."""
    uris = []
    for item in tracks:
        uri = (item.get("track") or {}).get("uri")
        if uri:
            uris.append(uri)
    return uris


def create_playlist(
    sp: spotipy.Spotify,
    user_id: str,
    genre: str,
    tracks: List[dict],
    settings: Settings,
) -> dict:
    """
    Create a playlist for one genre and add its tracks.

    Args:
        sp: Spotify client
        user_id: Owner of the new playlist
        genre: Genre label, used in the name and description
        tracks: Saved-track items in this genre
        settings: Naming and visibility settings

    Returns:
        The created playlist object

    Raises:
        PlaylistCreationError: If creation or any add request fails
    """
    logger = get_logger()
    name = settings.playlist_name(genre)
    try:
        playlist = api_call(
            sp.user_playlist_create,
            user_id,
            name,
            public=settings.playlist_public,
            description=settings.playlist_description(genre),
        )
        playlist_id = playlist["id"]

        # Spotify API accepts max 100 tracks per request
        uris = track_uris(tracks)
        for chunk in chunked(uris, PLAYLIST_ADD_CHUNK_SIZE):
            api_call(sp.playlist_add_items, playlist_id, list(chunk))
    except Exception as e:
        logger.debug(f"Creating {name} failed: {e}")
        raise PlaylistCreationError(genre) from e

    logger.info(f"  {name}: created with {len(uris)} tracks")
    return playlist


def create_all_playlists(
    sp: spotipy.Spotify,
    user_id: str,
    groups: Dict[str, List[dict]],
    settings: Settings,
    tracker: Optional[ProgressTracker] = None,
    dry_run: bool = False,
) -> PlaylistRunResult:
    """
    Create a playlist for every genre bucket, in bucket order.

    A failure for one genre is recorded and the remaining genres continue.

    Args:
        sp: Spotify client
        user_id: Owner of the new playlists
        groups: Output of group_by_genre
        settings: Naming and visibility settings
        tracker: Optional progress tracker
        dry_run: Log what would be created without calling the API; results go
            to ``planned`` instead of ``created``

    Returns:
        PlaylistRunResult with created ids and failure messages
    """
    logger = get_logger()
    result = PlaylistRunResult()
    genres = list(groups.keys())

    for i, genre in enumerate(genres):
        tracks = groups[genre]
        if tracker is not None:
            tracker.update(i, len(genres), f"Creating {genre} playlist...")
        if dry_run:
            logger.info(f"  [dry run] {settings.playlist_name(genre)}: {len(track_uris(tracks))} tracks")
            result.planned[genre] = len(track_uris(tracks))
            continue
        try:
            playlist = create_playlist(sp, user_id, genre, tracks, settings)
        except PlaylistCreationError as e:
            logger.error(str(e))
            result.failed[genre] = str(e)
            if tracker is not None:
                tracker.error = str(e)
            continue
        result.created[genre] = playlist["id"]
        if tracker is not None:
            tracker.update(i + 1, len(genres), f"Created {genre} playlist")

    return result
