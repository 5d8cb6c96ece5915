#!/usr/bin/env python3
"""
spotgenre Quickstart Example

Before running, set environment variables (or put them in .env):
    export SPOTIPY_CLIENT_ID="your_client_id"
    export SPOTIPY_CLIENT_SECRET="your_client_secret"
    export SPOTIPY_REDIRECT_URI="http://127.0.0.1:8888/callback"
"""

from spotgenre import GenreOrganizer, export_table

# Initialize session (authenticates via cached token or browser prompt)
org = GenreOrganizer.from_env(progress=True, seed=7)

# Profile, liked songs, enrichment, classification - no playlists yet
org.run(create=False)

summary = org.summary()
print(f"\n🎵 {len(org.liked_songs):,} liked songs in {len(summary)} genres")
print(summary.to_string(index=False))

# Keep a copy of the classified library
path = export_table(org.tracks(), "data/liked_songs_by_genre.parquet")
print(f"\n📋 Saved classified tracks to {path}")

# Preview, then create the playlists for real
preview = org.create_all_playlists(dry_run=True)
for genre, count in preview.planned.items():
    print(f"   • {genre}: {count} tracks")
result = org.create_all_playlists()
print(f"\n{org.message}")
for genre, playlist_id in result.created.items():
    print(f"   • {genre}: {playlist_id}")
