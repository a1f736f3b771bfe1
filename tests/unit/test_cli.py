import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from tennis import main


@pytest.fixture(autouse=True)
def quiet_logger():
    with patch("tennis.logger", MagicMock()):
        yield


@pytest.fixture
def mock_functions():
    with patch("tennis.cmd_h2h", return_value=0) as mock_h2h, \
         patch("tennis.cmd_score_bracket", return_value=0) as mock_score, \
         patch("tennis.cmd_bracket_board", return_value=0) as mock_bracket_board, \
         patch("tennis.cmd_leaderboard", return_value=0) as mock_leaderboard:
        yield {
            "h2h": mock_h2h,
            "score-bracket": mock_score,
            "bracket-board": mock_bracket_board,
            "leaderboard": mock_leaderboard,
        }


@pytest.fixture
def write_json(tmp_path):
    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return str(path)
    return _write


@pytest.mark.parametrize("args,command_key", [
    (["h2h", "events.json"], "h2h"),
    (["score-bracket", "bracket.json"], "score-bracket"),
    (["bracket-board", "brackets.json"], "bracket-board"),
    (["leaderboard", "predictions.json"], "leaderboard"),
])
def test_cli_command_routing(mock_functions, args, command_key):
    """Verify CLI routes commands correctly to their handler functions."""
    with patch.object(sys, 'argv', ["tennis.py"] + args):
        assert main() == 0
        mock_functions[command_key].assert_called_once()


def test_cli_leaderboard_args(mock_functions):
    with patch.object(sys, 'argv', ["tennis.py", "leaderboard", "p.json", "--timeframe", "Month",
                                    "--year", "2025", "--month", "3", "--json"]):
        main()
        args = mock_functions["leaderboard"].call_args[0][0]
        assert args.timeframe == "Month"
        assert args.year == 2025
        assert args.month == 3
        assert args.json is True


def test_cli_h2h_pair_args(mock_functions):
    with patch.object(sys, 'argv', ["tennis.py", "h2h", "e.json", "--pair", "7", "3"]):
        main()
        assert mock_functions["h2h"].call_args[0][0].pair == [7, 3]


def test_cli_missing_command():
    with patch.object(sys, 'argv', ["tennis.py"]), pytest.raises(SystemExit):
        main()


def test_cli_invalid_timeframe():
    with patch.object(sys, 'argv', ["tennis.py", "leaderboard", "p.json", "--timeframe", "Week"]), \
         pytest.raises(SystemExit):
        main()


def test_score_bracket_command(write_json, capsys):
    path = write_json("bracket.json", {
        "bracketId": "b-1",
        "userId": 2,
        "tournamentId": 9,
        "status": "locked",
        "predictions": [
            {"matchPosition": 1, "round": 1, "predictedWinnerId": 7, "actualWinnerId": 7},
            {"matchPosition": 2, "round": 2, "predictedWinnerId": 3, "actualWinnerId": 5},
        ],
        "championPick": {"predictedChampionId": 7, "actualChampionId": 7},
    })
    with patch.object(sys, 'argv', ["tennis.py", "score-bracket", path]):
        assert main() == 0

    scored = json.loads(capsys.readouterr().out)
    assert scored["total_score"] == 510
    assert scored["correct_picks"] == 2
    assert scored["total_resolved_picks"] == 3
    assert scored["accuracy_percentage"] == 67
    assert scored["round_scores"] == [{"round": 1, "points": 10}, {"round": 2, "points": 0}]


def test_h2h_command_pair(write_json, capsys):
    path = write_json("events.json", [
        {"matchId": 1, "competitorA": 7, "competitorB": 3, "winnerId": 7,
         "surface": "Clay", "tier": "Masters 1000", "date": "2025-04-12"},
        {"matchId": 2, "competitorA": 3, "competitorB": 7, "winnerId": 3,
         "surface": "Hard", "date": "2025-02-01"},
    ])
    with patch.object(sys, 'argv', ["tennis.py", "h2h", path, "--pair", "7", "3"]):
        assert main() == 0

    record = json.loads(capsys.readouterr().out)
    assert (record["low_id"], record["high_id"]) == (3, 7)
    assert record["matches_count"] == 2
    assert record["last_match_id"] == 1
    assert record["by_surface"]["clay"]["high_wins"] == 1


def test_h2h_command_unknown_pair(write_json):
    path = write_json("events.json", [])
    with patch.object(sys, 'argv', ["tennis.py", "h2h", path, "--pair", "1", "2"]):
        assert main() == 1


def test_leaderboard_command_json(write_json, capsys):
    predictions = write_json("predictions.json", [
        {"predictionId": 1, "userId": 1, "matchId": 100, "predictedWinnerId": 7,
         "confidenceLevel": 5, "predictionDate": "2025-03-10T10:00:00"},
        {"predictionId": 2, "userId": 2, "matchId": 100, "predictedWinnerId": 3,
         "confidenceLevel": 9, "predictionDate": "2025-03-10T11:00:00"},
    ])
    users = write_json("users.json", {"1": "ana"})
    results = write_json("results.json", [
        {"matchId": 100, "competitorA": 7, "competitorB": 3, "winnerId": 7,
         "surface": "Hard", "date": "2025-03-12"},
    ])
    argv = ["tennis.py", "leaderboard", predictions, "--users", users, "--results", results,
            "--timeframe", "Season", "--year", "2025", "--json"]
    with patch.object(sys, 'argv', argv):
        assert main() == 0

    entries = json.loads(capsys.readouterr().out)
    assert [(e["rank"], e["user_id"], e["display_name"], e["points"]) for e in entries] == [
        (1, 1, "ana", 10),
        (2, 2, "User 2", 0),
    ]


def test_tournament_leaderboard_needs_window(write_json):
    path = write_json("predictions.json", [])
    with patch.object(sys, 'argv', ["tennis.py", "leaderboard", path, "--timeframe", "Tournament"]):
        assert main() == 1


def test_bracket_board_command(write_json, capsys):
    def bracket(bracket_id, user_id, winner, status="locked"):
        return {
            "bracketId": bracket_id, "userId": user_id, "tournamentId": 9, "status": status,
            "predictions": [{"matchPosition": 1, "round": "Final", "predictedWinnerId": winner,
                             "actualWinnerId": 7}],
        }

    path = write_json("brackets.json", [
        bracket("a", 1, winner=3),
        bracket("b", 2, winner=7),
        bracket("c", 3, winner=7, status="draft"),
    ])
    with patch.object(sys, 'argv', ["tennis.py", "bracket-board", path]):
        assert main() == 0

    entries = json.loads(capsys.readouterr().out)
    assert [(e["rank"], e["bracket_id"], e["points"]) for e in entries] == [(1, "b", 10), (2, "a", 0)]


def test_malformed_payload_reports_error(write_json, capsys):
    path = write_json("bracket.json", {"bracketId": "b-1", "tournamentId": 9})
    with patch.object(sys, 'argv', ["tennis.py", "score-bracket", path]):
        assert main() == 1
    assert capsys.readouterr().out.startswith("ERROR:")


def test_bad_window_date_reports_error(write_json, capsys):
    path = write_json("predictions.json", [])
    argv = ["tennis.py", "leaderboard", path, "--timeframe", "Tournament",
            "--tournament", "9", "--start", "2025-13-01", "--end", "2025-03-31"]
    with patch.object(sys, 'argv', argv):
        assert main() == 1
    assert capsys.readouterr().out.startswith("ERROR:")
