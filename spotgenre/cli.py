"""
spotgenre CLI - sort liked songs into genre playlists from the command line.
"""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from .auth import authorize_url, clear_token_cache, exchange_code
from .config import CLASSIFIER_STRATEGIES, Settings
from .errors import SpotgenreError
from .export import export_table
from .logging_utils import setup_logging
from .organizer import GenreOrganizer


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="spotgenre",
        description="Organize your Spotify liked songs into genre playlists.",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    ap.add_argument("--progress", action="store_true", help="Show progress bars.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    # Login command
    ap_login = sub.add_parser("login", help="Authorize spotgenre with your Spotify account.")
    ap_login.add_argument("--code", help="Authorization code from the redirect URL.")
    ap_login.add_argument("--state", help="State value from the redirect URL.")
    ap_login.add_argument("--expected-state", help="State printed by the previous login step.")

    # Organize command
    ap_org = sub.add_parser("organize", help="Fetch, enrich and classify liked songs.")
    ap_org.add_argument("--export", help="Write the classified tracks to this path (.parquet, .csv, .json).")

    # Create command
    ap_create = sub.add_parser("create", help="Organize liked songs and create genre playlists.")
    ap_create.add_argument("--dry-run", action="store_true", help="Show playlists without creating them.")

    for p in (ap_org, ap_create):
        p.add_argument("--classifier", choices=CLASSIFIER_STRATEGIES,
                       help="Classification strategy (default: SPOTGENRE_CLASSIFIER or hybrid).")
        p.add_argument("--seed", type=int, help="Seed for mock audio features.")

    sub.add_parser("logout", help="Remove the cached Spotify token.")
    return ap


def _print_summary(org: GenreOrganizer) -> None:
    summary = org.summary()
    if summary.empty:
        print("No liked songs found.")
        return
    print(f"\n🎵 {len(org.liked_songs):,} liked songs in {len(summary)} genres:")
    for row in summary.itertuples(index=False):
        print(f"   • {row.genre}: {row.track_count:,}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
        if getattr(args, "classifier", None):
            settings.classifier = args.classifier
        logger = setup_logging(settings.log_dir, "DEBUG" if args.verbose else settings.log_level)
        if args.verbose:
            for handler in logger.handlers:
                if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
                    handler.setLevel(logging.DEBUG)

        if args.cmd == "login":
            if not args.code:
                url, state = authorize_url(settings)
                print("Open this URL in your browser and approve access:")
                print(f"  {url}")
                print(f"Then run: spotgenre login --code <code> --state <state> --expected-state {state}")
                return 0
            exchange_code(settings, args.code, state=args.state, expected_state=args.expected_state)
            print("✅ Logged in")
            return 0

        if args.cmd == "logout":
            removed = clear_token_cache(settings)
            print("✅ Logged out" if removed else "Not logged in")
            return 0

        org = GenreOrganizer.from_env(progress=args.progress, settings=settings, seed=args.seed)

        if args.cmd == "organize":
            org.run(create=False)
            _print_summary(org)
            if args.export:
                df = org.tracks()
                path = export_table(df, args.export)
                print(f"✅ Exported {len(df):,} rows to {path}")
            return 0

        if args.cmd == "create":
            result = org.run(create=True, dry_run=args.dry_run)
            _print_summary(org)
            if args.dry_run:
                for genre, count in result.planned.items():
                    print(f"   • would create {genre} playlist with {count:,} tracks")
                print(f"\n{org.message}")
                return 0
            for genre, message in result.failed.items():
                print(f"❌ {message}")
            print(f"\n{org.message}")
            return 0 if result.ok else 1
    except SpotgenreError as e:
        print(f"❌ {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
