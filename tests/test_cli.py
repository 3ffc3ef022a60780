"""Tests for the main.py command line (no viewer, no offscreen GL)."""

import sys

import pytest

from main import _build_parser, _config_from_args, main


class TestParser:
    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py"])
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        with pytest.raises(SystemExit):
            main()
        assert "usage" in capsys.readouterr().out.lower()

    def test_render_defaults(self):
        args = _build_parser().parse_args(["render"])
        assert args.frames == 120
        assert args.every == 1
        assert args.out == "renders"
        assert not args.gif

    def test_config_from_args(self):
        args = _build_parser().parse_args(["view", "--seed", "7", "--assets", "/tmp/meadow"])
        config = _config_from_args(args)
        assert config.seed == 7
        assert config.assets.root == "/tmp/meadow"
        assert config.clouds.count == 15

    def test_smoketest_flag(self):
        args = _build_parser().parse_args(["describe", "--smoketest"])
        config = _config_from_args(args)
        assert config.seed == 0
        assert not config.assets.enabled
        assert config.trees.count == 10


class TestDescribe:
    def test_describe_prints_summary(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["main.py", "describe", "--smoketest", "--seed", "42"])
        monkeypatch.setattr(sys, "excepthook", sys.excepthook)
        main()
        out = capsys.readouterr().out
        assert out.startswith("Scene #00002a (seed=42)")
        assert "clouds: 3" in out
        assert "with 20 ornaments" in out
