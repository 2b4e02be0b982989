"""Tests for the command-line tools."""

import json

import httpx
import pytest

from grid_snake import cli
from grid_snake.cli import _build_parser, main, simulate
from grid_snake.config import GameConfig
from grid_snake.leaderboard import LeaderboardClient


def _fake_client(handler):
    def factory(args):
        return LeaderboardClient(
            "http://lb.test/adduser", transport=httpx.MockTransport(handler),
        )
    return factory


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.seed is None
        assert args.max_steps == 1_000
        assert args.name == "sim"

    def test_simulate_flags(self):
        args = _build_parser().parse_args([
            "simulate", "--seed", "4", "--board-size", "12", "--max-steps", "50",
        ])
        assert args.seed == 4
        assert args.board_size == 12
        assert args.max_steps == 50

    def test_submit_args(self):
        args = _build_parser().parse_args(["submit", "alice", "42"])
        assert args.name == "alice"
        assert args.score == 42


class TestSimulate:
    def test_summary(self):
        summary = simulate(GameConfig(seed=3), max_steps=500)
        assert summary["player_name"] == "sim"
        assert summary["ticks"] >= 1
        assert summary["length"] >= 1
        if summary["finished"]:
            assert summary["reason"] in ("wall", "self", "board_full")

    def test_deterministic(self):
        assert simulate(GameConfig(seed=8)) == simulate(GameConfig(seed=8))

    def test_step_limit(self):
        summary = simulate(GameConfig(seed=1), max_steps=1)
        assert summary["ticks"] == 1

    def test_main_prints_json(self, capsys):
        assert main(["simulate", "--seed", "2", "--max-steps", "20"]) == 0
        out = json.loads(capsys.readouterr().out)
        assert "score" in out


class TestLeaderboardCommands:
    def test_leaderboard_prints_ranks(self, monkeypatch, capsys):
        def handler(request):
            return httpx.Response(200, json=[
                {"id": 1, "player_name": "zed", "score": 90},
                {"id": 2, "player_name": "amy", "score": 20},
            ])

        monkeypatch.setattr(cli, "_client", _fake_client(handler))
        assert main(["leaderboard"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["1", "zed", "90"]
        assert lines[1].split() == ["2", "amy", "20"]

    def test_leaderboard_unavailable(self, monkeypatch):
        monkeypatch.setattr(
            cli, "_client", _fake_client(lambda request: httpx.Response(500)),
        )
        assert main(["leaderboard"]) == 1

    def test_submit(self, monkeypatch):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(201)

        monkeypatch.setattr(cli, "_client", _fake_client(handler))
        assert main(["submit", "alice", "42"]) == 0
        assert seen == [{"player_name": "alice", "score": 42}]

    def test_submit_failure(self, monkeypatch):
        monkeypatch.setattr(
            cli, "_client", _fake_client(lambda request: httpx.Response(502)),
        )
        assert main(["submit", "alice", "1"]) == 1


class TestConfigCommand:
    def test_dump_and_save(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        assert main(["config", "--output", str(path)]) == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed["board_size"] == 20
        assert GameConfig.load(path) == GameConfig.from_env()

    def test_load_config_file(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        GameConfig(board_size=9).save(path)
        assert main(["--config", str(path), "config"]) == 0
        assert json.loads(capsys.readouterr().out)["board_size"] == 9


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("GRID_SNAKE_LEADERBOARD_URL", raising=False)
    monkeypatch.delenv("GRID_SNAKE_BOARD_SIZE", raising=False)
