"""
Liked-song and profile retrieval.
"""

from __future__ import annotations

from typing import List, Optional

import spotipy

from .config import LIKED_SONGS_PAGE_SIZE
from .errors import FetchError
from .logging_utils import get_logger
from .progress import ProgressTracker
from .ratelimit import api_call

LIKED_SONGS_STAGE = "Fetching liked songs..."


def fetch_user_profile(sp: spotipy.Spotify) -> dict:
    """
    Get the current user's profile (``/me``).

    Raises:
        FetchError: If the profile cannot be retrieved
    """
    try:
        user = api_call(sp.current_user)
    except Exception as e:
        get_logger().debug(f"current_user failed: {e}")
        raise FetchError("Failed to fetch user profile") from e
    if not user or not user.get("id"):
        raise FetchError("Failed to fetch user profile")
    return user


def fetch_liked_songs(
    sp: spotipy.Spotify,
    tracker: Optional[ProgressTracker] = None,
) -> List[dict]:
    """
    Fetch every saved track, following pagination until ``next`` is empty.

    Args:
        sp: Spotify client
        tracker: Optional progress tracker

    Returns:
        Saved-track items (``{"added_at": ..., "track": {...}}``) in library order

    Raises:
        FetchError: If any page request fails
    """
    songs: List[dict] = []
    total = 0
    if tracker is not None:
        tracker.update(0, 0, LIKED_SONGS_STAGE)

    try:
        page = api_call(sp.current_user_saved_tracks, limit=LIKED_SONGS_PAGE_SIZE)
        while page:
            songs.extend(item for item in page.get("items") or [] if item and item.get("track"))
            total = page.get("total") or total
            if tracker is not None:
                tracker.update(len(songs), total, LIKED_SONGS_STAGE)
            if not page.get("next"):
                break
            page = api_call(sp.next, page)
    except Exception as e:
        get_logger().debug(f"Liked songs fetch failed after {len(songs)} items: {e}")
        raise FetchError("Failed to fetch liked songs") from e

    get_logger().info(f"Fetched {len(songs):,} liked songs")
    return songs
