"""
GenreOrganizer - the session object tying the pipeline together.

Usage:
    from spotgenre import GenreOrganizer

    org = GenreOrganizer.from_env(progress=True)
    org.load_user()
    org.fetch_liked_songs()
    org.organize_by_genre()
    org.create_all_playlists()
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional

import pandas as pd
import spotipy

from .auth import clear_token_cache, get_spotify_client
from .classify import GenreClassifier
from .config import Settings
from .enrich import enrich_tracks
from .errors import SpotgenreError
from .grouping import genre_summary, group_by_genre, tracks_frame
from .library import fetch_liked_songs, fetch_user_profile
from .logging_utils import get_logger, timed_step
from .playlists import PlaylistRunResult, create_all_playlists
from .progress import ProgressTracker, Status
from .ratelimit import set_request_delay

ALL_CREATED_MESSAGE = "All playlists created successfully!"
DRY_RUN_MESSAGE = "Dry run: no playlists were created."


class GenreOrganizer:
    """Holds the user, liked songs and genre buckets for one session."""

    def __init__(
        self,
        sp: spotipy.Spotify,
        settings: Optional[Settings] = None,
        classifier: Optional[GenreClassifier] = None,
        tracker: Optional[ProgressTracker] = None,
    ):
        self.sp = sp
        self.settings = settings or Settings.from_env()
        self.classifier = classifier or GenreClassifier(
            self.settings.classifier, mock=self.settings.mock_features
        )
        self.tracker = tracker or ProgressTracker()
        set_request_delay(self.settings.api_delay)
        self.user: Optional[dict] = None
        self.liked_songs: List[dict] = []
        self.genre_playlists: Dict[str, List[dict]] = {}
        self.message: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        progress: bool = False,
        settings: Optional[Settings] = None,
        seed: Optional[int] = None,
    ) -> "GenreOrganizer":
        """Build an organizer with an authenticated client from environment settings."""
        settings = settings or Settings.from_env()
        sp = get_spotify_client(settings)
        rng = random.Random(seed) if seed is not None else None
        classifier = GenreClassifier(settings.classifier, mock=settings.mock_features, rng=rng)
        return cls(sp, settings=settings, classifier=classifier, tracker=ProgressTracker(show_bar=progress))

    @property
    def status(self) -> Status:
        return self.tracker.status

    @property
    def error(self) -> Optional[str]:
        return self.tracker.error

    def load_user(self) -> dict:
        """Fetch and store the current user's profile."""
        try:
            self.user = fetch_user_profile(self.sp)
        except SpotgenreError as e:
            self.tracker.fail(str(e))
            raise
        get_logger().info(f"Logged in as {self.user.get('display_name') or self.user['id']}")
        return self.user

    def fetch_liked_songs(self) -> List[dict]:
        """Fetch all liked songs and enrich them with audio features and genres."""
        self.tracker.start("Fetching liked songs...")
        try:
            with timed_step("Fetch liked songs"):
                songs = fetch_liked_songs(self.sp, tracker=self.tracker)
            with timed_step("Enrich tracks"):
                enrich_tracks(self.sp, songs, tracker=self.tracker)
        except SpotgenreError as e:
            self.tracker.fail(str(e))
            raise
        self.liked_songs = songs
        self.tracker.finish()
        return songs

    def organize_by_genre(self) -> Dict[str, List[dict]]:
        """Classify liked songs and bucket them by genre."""
        self.tracker.start("Analyzing genres...")
        with timed_step("Classify genres"):
            self.genre_playlists = group_by_genre(
                self.liked_songs, self.classifier, tracker=self.tracker
            )
        self.tracker.finish()
        return self.genre_playlists

    def create_all_playlists(self, dry_run: bool = False) -> PlaylistRunResult:
        """
        Create one playlist per genre bucket.

        Raises:
            SpotgenreError: If no user is loaded or there are no genre groups
        """
        if self.user is None:
            raise SpotgenreError("No user loaded; call load_user() first")
        if not self.genre_playlists:
            raise SpotgenreError("No genre groups; call organize_by_genre() first")
        self.tracker.start("Creating playlists...")
        with timed_step("Create playlists"):
            result = create_all_playlists(
                self.sp,
                self.user["id"],
                self.genre_playlists,
                self.settings,
                tracker=self.tracker,
                dry_run=dry_run,
            )
        if dry_run:
            self.message = DRY_RUN_MESSAGE
            self.tracker.finish()
        elif result.ok:
            self.message = ALL_CREATED_MESSAGE
            self.tracker.finish()
        else:
            self.message = list(result.failed.values())[-1]
            self.tracker.fail(self.message)
        return result

    def run(self, create: bool = True, dry_run: bool = False) -> Optional[PlaylistRunResult]:
        """Run the whole pipeline: profile, liked songs, classification, playlists."""
        self.load_user()
        self.fetch_liked_songs()
        self.organize_by_genre()
        if not create:
            return None
        return self.create_all_playlists(dry_run=dry_run)

    def summary(self) -> pd.DataFrame:
        return genre_summary(self.genre_playlists)

    def tracks(self) -> pd.DataFrame:
        return tracks_frame(self.genre_playlists)

    def logout(self, clear_cache: bool = True) -> None:
        """Forget the session state and, by default, the cached token."""
        self.user = None
        self.liked_songs = []
        self.genre_playlists = {}
        self.message = None
        self.tracker.reset()
        if clear_cache:
            clear_token_cache(self.settings)
