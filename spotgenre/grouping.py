"""
Grouping of classified tracks into genre buckets, plus tidy DataFrame views.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd

from .classify import FEATURE_KEYS, GenreClassifier
from .progress import ProgressTracker

ANALYZE_STAGE = "Analyzing genres..."

TRACK_COLUMNS = [
    "track_id", "name", "artists", "primary_artist_id", "uri",
    "added_at", "genres", "genre_label", *FEATURE_KEYS,
]


def group_by_genre(
    songs: List[dict],
    classifier: GenreClassifier,
    tracker: Optional[ProgressTracker] = None,
) -> Dict[str, List[dict]]:
    """
    Classify each saved track and bucket it by label.

    Args:
        songs: Enriched saved-track items
        classifier: Classifier applied to each item's track
        tracker: Optional progress tracker

    Returns:
        Dict mapping label -> saved items. Labels appear in the order they were
        first assigned; items keep liked-song order within a bucket.
    """
    groups: Dict[str, List[dict]] = {}
    total = len(songs)
    if tracker is not None:
        tracker.update(0, total, ANALYZE_STAGE)

    for i, song in enumerate(songs):
        genre = classifier.classify(song["track"])
        groups.setdefault(genre, []).append(song)
        if tracker is not None:
            tracker.update(i + 1, total, ANALYZE_STAGE)

    return groups


def genre_summary(groups: Dict[str, List[dict]]) -> pd.DataFrame:
    """Track counts per genre, largest bucket first."""
    df = pd.DataFrame(
        [(genre, len(items)) for genre, items in groups.items()],
        columns=["genre", "track_count"],
    )
    if df.empty:
        return df
    # Stable sort keeps first-assigned order among equal counts
    return df.sort_values("track_count", ascending=False, kind="mergesort").reset_index(drop=True)


def tracks_frame(groups: Dict[str, List[dict]]) -> pd.DataFrame:
    """
    One row per classified track with its label and selected audio features.

    Args:
        groups: Output of group_by_genre

    Returns:
        DataFrame with TRACK_COLUMNS
    """
    rows = []
    for genre, items in groups.items():
        for item in items:
            track = item.get("track") or {}
            artists = track.get("artists") or []
            features = track.get("audio_features") or {}
            row = {
                "track_id": track.get("id"),
                "name": track.get("name"),
                "artists": ", ".join(a.get("name", "") for a in artists if a),
                "primary_artist_id": artists[0].get("id") if artists and artists[0] else None,
                "uri": track.get("uri"),
                "added_at": item.get("added_at"),
                "genres": ", ".join(track.get("genres") or []),
                "genre_label": genre,
            }
            for key in FEATURE_KEYS:
                row[key] = features.get(key)
            rows.append(row)
    return pd.DataFrame(rows, columns=TRACK_COLUMNS)
