"""
Track enrichment: audio features and artist genres.

Used by the organizer after liked songs are fetched. Individual request
failures are logged and leave the corresponding data empty; they never abort
the run.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import spotipy

from .config import AUDIO_FEATURES_BATCH_SIZE
from .logging_utils import get_logger
from .progress import ProgressTracker
from .ratelimit import api_call, chunked

AUDIO_FEATURES_STAGE = "Fetching audio features in batches..."
GENRES_STAGE = "Fetching genres for each song..."


def fetch_audio_features(
    sp: spotipy.Spotify,
    track_ids: List[str],
    tracker: Optional[ProgressTracker] = None,
) -> Dict[str, dict]:
    """
    Fetch audio features for tracks via Spotify API (batches of 100).

    Args:
        sp: Spotify client
        track_ids: Track IDs; falsy entries (local files) are dropped
        tracker: Optional progress tracker

    Returns:
        Dict mapping track_id -> audio features. Tracks whose batch failed or
        which Spotify has no features for are absent.
    """
    logger = get_logger()
    ids = [tid for tid in track_ids if tid]
    features_map: Dict[str, dict] = {}
    if tracker is not None:
        tracker.update(0, len(ids), AUDIO_FEATURES_STAGE)

    for i, batch in enumerate(chunked(ids, AUDIO_FEATURES_BATCH_SIZE)):
        try:
            result = api_call(sp.audio_features, list(batch))
        except Exception as e:
            # Endpoint may be restricted for newer apps
            logger.debug(f"  Audio features batch {i + 1} failed: {e}")
            result = None
        if isinstance(result, dict):
            result = result.get("audio_features")
        if isinstance(result, list):
            for features in result:
                if features and features.get("id"):
                    features_map[features["id"]] = features
        done = min((i + 1) * AUDIO_FEATURES_BATCH_SIZE, len(ids))
        if tracker is not None:
            tracker.update(done, len(ids), AUDIO_FEATURES_STAGE)

    logger.info(f"Audio features found for {len(features_map):,}/{len(ids):,} tracks")
    return features_map


def primary_artist_id(track: dict) -> Optional[str]:
    artists = track.get("artists") or []
    if not artists or not artists[0]:
        return None
    return artists[0].get("id")


def fetch_artist_genres(
    sp: spotipy.Spotify,
    artist_id: Optional[str],
    cache: Optional[Dict[str, List[str]]] = None,
) -> List[str]:
    """
    Get the genre list for one artist.

    Returns an empty list when the id is missing or the request fails. Failed
    lookups are not cached.
    """
    if not artist_id:
        return []
    if cache is not None and artist_id in cache:
        return list(cache[artist_id])
    try:
        artist = api_call(sp.artist, artist_id)
    except Exception as e:
        get_logger().debug(f"  Artist lookup failed for {artist_id}: {e}")
        return []
    genres = list((artist or {}).get("genres") or [])
    if cache is not None:
        cache[artist_id] = genres
    return genres


def enrich_tracks(
    sp: spotipy.Spotify,
    songs: List[dict],
    tracker: Optional[ProgressTracker] = None,
    cache_artists: bool = True,
) -> List[dict]:
    """
    Attach ``genres`` and ``audio_features`` to each saved track in place.

    Args:
        sp: Spotify client
        songs: Saved-track items from fetch_liked_songs
        tracker: Optional progress tracker
        cache_artists: Reuse artist genres within this run

    Returns:
        The same list, enriched
    """
    logger = get_logger()
    track_ids = [item["track"].get("id") for item in songs]
    features_map = fetch_audio_features(sp, track_ids, tracker=tracker)

    artist_cache: Optional[Dict[str, List[str]]] = {} if cache_artists else None
    total = len(songs)
    if tracker is not None:
        tracker.update(0, total, GENRES_STAGE)

    for i, item in enumerate(songs):
        track = item["track"]
        genres = fetch_artist_genres(sp, primary_artist_id(track), cache=artist_cache)
        track["genres"] = genres
        track["audio_features"] = features_map.get(track.get("id"))
        logger.debug(
            f"Processed song {i + 1}/{total}: {track.get('name')} - Genres: {', '.join(genres)}"
        )
        if tracker is not None:
            tracker.update(i + 1, total, GENRES_STAGE)

    return songs
