from unittest.mock import MagicMock, patch

import pandas as pd
import pytest

from spotgenre.cli import build_parser, main
from spotgenre.errors import FetchError
from spotgenre.organizer import DRY_RUN_MESSAGE
from spotgenre.playlists import PlaylistRunResult


@pytest.fixture(autouse=True)
def data_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("SPOTGENRE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SPOTIPY_CLIENT_ID", "cid")
    monkeypatch.setenv("SPOTIPY_CLIENT_SECRET", "secret")
    return tmp_path


def _fake_org():
    org = MagicMock()
    org.liked_songs = [object(), object()]
    org.summary.return_value = pd.DataFrame({"genre": ["Rock"], "track_count": [2]})
    org.tracks.return_value = pd.DataFrame({"track_id": ["t1", "t2"], "genre_label": ["Rock", "Rock"]})
    org.message = "All playlists created successfully!"
    return org


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@patch("spotgenre.cli.authorize_url", return_value=("https://auth.example/x", "state123"))
def test_login_prints_url(mock_url, capsys):
    assert main(["login"]) == 0
    out = capsys.readouterr().out
    assert "https://auth.example/x" in out
    assert "state123" in out


@patch("spotgenre.cli.exchange_code", return_value="tok")
def test_login_with_code(mock_exchange, capsys):
    assert main(["login", "--code", "c", "--state", "s", "--expected-state", "s"]) == 0
    assert mock_exchange.call_args.args[1] == "c"


def test_logout(data_dir, capsys):
    (data_dir / ".cache").write_text("{}")
    assert main(["logout"]) == 0
    assert not (data_dir / ".cache").exists()


@patch("spotgenre.cli.GenreOrganizer.from_env")
def test_organize_with_export(mock_from_env, data_dir, capsys):
    org = _fake_org()
    mock_from_env.return_value = org
    out_path = data_dir / "tracks.csv"

    assert main(["organize", "--seed", "3", "--export", str(out_path)]) == 0

    org.run.assert_called_once_with(create=False)
    assert mock_from_env.call_args.kwargs["seed"] == 3
    assert out_path.exists()
    assert "Rock: 2" in capsys.readouterr().out


@patch("spotgenre.cli.GenreOrganizer.from_env")
def test_create_partial_failure_exit_code(mock_from_env, capsys):
    org = _fake_org()
    org.run.return_value = PlaylistRunResult(created={"Rock": "p1"}, failed={"Pop": "Failed to create Pop playlist"})
    org.message = "Failed to create Pop playlist"
    mock_from_env.return_value = org

    assert main(["create"]) == 1
    assert "Failed to create Pop playlist" in capsys.readouterr().out


@patch("spotgenre.cli.GenreOrganizer.from_env")
def test_create_dry_run(mock_from_env, capsys):
    org = _fake_org()
    org.run.return_value = PlaylistRunResult(planned={"Rock": 2})
    org.message = DRY_RUN_MESSAGE
    mock_from_env.return_value = org

    assert main(["create", "--dry-run", "--classifier", "artist"]) == 0
    org.run.assert_called_once_with(create=True, dry_run=True)
    assert mock_from_env.call_args.kwargs["settings"].classifier == "artist"
    out = capsys.readouterr().out
    assert "would create Rock playlist with 2 tracks" in out
    assert DRY_RUN_MESSAGE in out
    assert "All playlists created successfully!" not in out


@patch("spotgenre.cli.GenreOrganizer.from_env")
def test_errors_become_exit_code(mock_from_env, capsys):
    org = _fake_org()
    org.run.side_effect = FetchError("Failed to fetch liked songs")
    mock_from_env.return_value = org

    assert main(["organize"]) == 1
    assert "Failed to fetch liked songs" in capsys.readouterr().out


def test_invalid_classifier_env_becomes_exit_code(monkeypatch, capsys):
    monkeypatch.setenv("SPOTGENRE_CLASSIFIER", "vibes")
    assert main(["logout"]) == 1
    assert "❌ Unknown classifier 'vibes'" in capsys.readouterr().out
