import random

import pandas as pd

from spotgenre.classify import GenreClassifier
from spotgenre.export import export_table
from spotgenre.grouping import TRACK_COLUMNS, genre_summary, group_by_genre, tracks_frame
from spotgenre.progress import ProgressTracker

from conftest import make_saved_track


def _enriched(track_id, genres, features=None):
    item = make_saved_track(track_id)
    item["track"]["genres"] = genres
    item["track"]["audio_features"] = features
    return item


def test_group_by_genre_keeps_order():
    songs = [
        _enriched("t1", ["bebop"]),
        _enriched("t2", ["album rock"]),
        _enriched("t3", ["cool jazz"]),
    ]
    groups = group_by_genre(songs, GenreClassifier("artist"))
    assert list(groups) == ["Jazz", "Rock"]
    assert [s["track"]["id"] for s in groups["Jazz"]] == ["t1", "t3"]


def test_group_by_genre_progress():
    tracker = ProgressTracker()
    seen = []
    tracker.add_listener(lambda p: seen.append(p.current))
    group_by_genre([_enriched("t1", []), _enriched("t2", [])],
                   GenreClassifier("features", rng=random.Random(1)), tracker=tracker)
    assert seen == [0, 1, 2]
    assert tracker.progress.stage == "Analyzing genres..."


def test_group_by_genre_empty():
    assert group_by_genre([], GenreClassifier()) == {}


def test_genre_summary_sorted():
    groups = {"Jazz": [1], "Rock": [1, 2, 3], "Pop": [1]}
    summary = genre_summary(groups)
    assert list(summary["genre"]) == ["Rock", "Jazz", "Pop"]
    assert list(summary["track_count"]) == [3, 1, 1]
    assert genre_summary({}).empty


def test_tracks_frame_columns():
    groups = {"Rock": [_enriched("t1", ["album rock"], {"energy": 0.9})]}
    df = tracks_frame(groups)
    assert list(df.columns) == TRACK_COLUMNS
    row = df.iloc[0]
    assert row["genre_label"] == "Rock"
    assert row["genres"] == "album rock"
    assert row["energy"] == 0.9
    assert pd.isna(row["valence"])


def test_export_table_csv_and_default(tmp_path):
    df = pd.DataFrame({"genre": ["Rock"], "track_count": [2]})
    out = export_table(df, str(tmp_path / "nested" / "summary.csv"))
    assert out.endswith("summary.csv")
    assert pd.read_csv(out).iloc[0]["track_count"] == 2

    out_json = export_table(df, str(tmp_path / "summary.json"))
    assert pd.read_json(out_json, lines=True).iloc[0]["genre"] == "Rock"
