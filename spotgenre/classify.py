"""
Genre classification for enriched tracks.

Two signals are available per track:

- audio features (danceability, energy, valence, acousticness), compared
  against fixed thresholds
- the primary artist's Spotify genre strings, bucketed by keyword

When a track has no audio features, mock features can be drawn at random so
every track still receives a label.
"""

from __future__ import annotations

import random
import re
from collections import Counter
from typing import Dict, Iterable, List, Optional

from .config import CLASSIFIER_STRATEGIES, DEFAULT_GENRE, GENRES

FEATURE_KEYS = ("danceability", "energy", "valence", "acousticness")

# Neutral value for a feature Spotify did not return
_MISSING_FEATURE = 0.5

# Ordered: the first rule whose keyword occurs in an artist genre wins that genre.
# More specific families come before the broad ones ("indie rock" -> Indie).
GENRE_KEYWORD_RULES = [
    ("Hip-Hop", ["hip hop", "hip-hop", "rap", "trap", "drill", "grime", "boom bap", "crunk"]),
    ("R&B", ["r&b", "rnb", "neo soul", "soul", "funk", "new jack swing", "quiet storm"]),
    ("Electronic", [
        "electronic", "electronica", "edm", "house", "techno", "trance", "dubstep",
        "drum and bass", "electro", "synthwave", "idm", "ambient", "downtempo", "big room",
    ]),
    ("Jazz", ["jazz", "bebop", "big band", "bossa nova", "swing"]),
    ("Classical", [
        "classical", "baroque", "orchestra", "opera", "symphony", "chamber music", "choir",
        "romantic era", "compositional", "soundtrack", "score",
    ]),
    ("Country", ["country", "americana", "bluegrass", "honky tonk", "outlaw"]),
    ("Indie", ["indie", "lo-fi", "bedroom", "folk", "singer-songwriter"]),
    ("Alternative", ["alternative", "grunge", "emo", "shoegaze", "post-punk", "punk"]),
    ("Rock", ["rock", "metal", "hardcore"]),
    ("Pop", ["pop", "boy band", "girl group"]),
]


def _norm(genre: str) -> str:
    genre = (genre or "").strip().lower()
    genre = re.sub(r"[/_]", " ", genre)
    return re.sub(r"\s+", " ", genre)


def bucket_artist_genre(genre: str) -> Optional[str]:
    """Map a single Spotify artist genre (e.g. 'indie rock') to a label."""
    g = _norm(genre)
    if not g:
        return None
    for label, needles in GENRE_KEYWORD_RULES:
        if any(needle in g for needle in needles):
            return label
    return None


def classify_by_artist_genres(genres: Iterable[str]) -> Optional[str]:
    """
    Vote across an artist's genres.

    Returns:
        The label with the most keyword hits (ties go to the label listed
        first in GENRES), or None if nothing matched.
    """
    votes = Counter(b for b in (bucket_artist_genre(g) for g in genres or []) if b)
    if not votes:
        return None
    best = max(votes.values())
    for label in GENRES:
        if votes.get(label) == best:
            return label
    return None


def _feature(features: dict, key: str) -> float:
    value = features.get(key)
    if value is None:
        return _MISSING_FEATURE
    return float(value)


def classify_by_features(features: dict) -> str:
    """
    Threshold rules over audio features, evaluated in order.

    Args:
        features: Mapping with danceability, energy, valence, acousticness in [0, 1]

    Returns:
        Genre label
    """
    danceability = _feature(features, "danceability")
    energy = _feature(features, "energy")
    valence = _feature(features, "valence")
    acousticness = _feature(features, "acousticness")

    if energy > 0.8 and danceability > 0.7:
        return "Electronic"
    if acousticness > 0.7:
        return "Indie"
    if energy > 0.7:
        return "Rock"
    if danceability > 0.8:
        return "Hip-Hop"
    if valence < 0.3:
        return "Alternative"
    return DEFAULT_GENRE


def mock_features(rng: Optional[random.Random] = None) -> Dict[str, float]:
    """Uniform random values in [0, 1) for each feature used by the thresholds."""
    rng = rng or random
    return {key: rng.random() for key in FEATURE_KEYS}


class GenreClassifier:
    """
    Assigns one genre label per track.

    Strategies:
        features: audio-feature thresholds (mock features when missing)
        artist:   artist genre keywords, falling back to the default label
        hybrid:   artist genre keywords first, then audio-feature thresholds

    Usage:
        classifier = GenreClassifier("hybrid", rng=random.Random(7))
        label = classifier.classify(saved_item["track"])
    """

    def __init__(self, strategy: str = "hybrid", mock: bool = True, rng: Optional[random.Random] = None):
        if strategy not in CLASSIFIER_STRATEGIES:
            raise ValueError(f"Unknown classifier strategy: {strategy}")
        self.strategy = strategy
        self.mock = mock
        self.rng = rng or random.Random()

    def _from_features(self, track: dict) -> str:
        features = track.get("audio_features")
        if not features:
            if not self.mock:
                return DEFAULT_GENRE
            features = mock_features(self.rng)
        return classify_by_features(features)

    def classify(self, track: dict) -> str:
        if self.strategy == "features":
            return self._from_features(track)
        label = classify_by_artist_genres(track.get("genres") or [])
        if label is not None:
            return label
        if self.strategy == "artist":
            return DEFAULT_GENRE
        return self._from_features(track)

    def classify_many(self, tracks: Iterable[dict]) -> List[str]:
        return [self.classify(t) for t in tracks]
