"""Tests for CLI commands."""

import logging

import pytest
from click.testing import CliRunner

from siteimg.cli import _log_level, cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    from siteimg.config import hierarchy

    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global.yaml")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("COLUMNS", "200")
    for env_key in hierarchy._ENV_MAP:
        monkeypatch.delenv(env_key, raising=False)


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "siteimg" in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0


class TestLogLevel:
    def test_default_is_warning(self):
        assert _log_level(0) == logging.WARNING

    def test_configured_level_without_flags(self):
        assert _log_level(0, "ERROR") == logging.ERROR
        assert _log_level(0, "DEBUG") == logging.DEBUG

    def test_verbose_lowers_configured_level(self):
        assert _log_level(1, "ERROR") == logging.INFO
        assert _log_level(1, "DEBUG") == logging.DEBUG
        assert _log_level(2, "ERROR") == logging.DEBUG

    def test_unknown_env_level_is_config_error(self, runner, monkeypatch):
        monkeypatch.setenv("SITEIMG_LOG_LEVEL", "chatty")
        result = runner.invoke(cli, ["optimize", "https://example.com/x.jpg"])
        assert result.exit_code == 2

    def test_env_level_accepted(self, runner, monkeypatch):
        monkeypatch.setenv("SITEIMG_LOG_LEVEL", "error")
        result = runner.invoke(cli, ["optimize", "https://example.com/x.jpg"])
        assert result.exit_code == 0


class TestOptimizeCommand:
    def test_help(self, runner):
        result = runner.invoke(cli, ["optimize", "--help"])
        assert result.exit_code == 0
        assert "--preset" in result.output
        assert "--width" in result.output

    def test_remote_pass_through(self, runner):
        result = runner.invoke(cli, ["optimize", "https://example.com/x.jpg"])
        assert result.exit_code == 0
        assert "pass_through" in result.output
        assert "1200x630" in result.output

    def test_local_image(self, runner, public_dir, tmp_path):
        result = runner.invoke(
            cli,
            [
                "optimize", "/images/hero.png",
                "--width", "400", "--height", "225",
                "--public-dir", str(public_dir),
                "--out-dir", str(tmp_path / "out"),
            ],
        )
        assert result.exit_code == 0
        assert "optimized" in result.output
        assert any((tmp_path / "out").iterdir())

    def test_card_preset(self, runner, public_dir, tmp_path):
        result = runner.invoke(
            cli,
            [
                "optimize", "/images/hero.png", "--preset", "card",
                "--public-dir", str(public_dir), "--out-dir", str(tmp_path / "out"),
            ],
        )
        assert result.exit_code == 0
        assert "400x225" in result.output

    def test_missing_image_degrades(self, runner, tmp_path):
        result = runner.invoke(
            cli,
            [
                "optimize", "/nope.png", "--width", "10", "--height", "10",
                "--public-dir", str(tmp_path), "--out-dir", str(tmp_path / "out"),
            ],
        )
        assert result.exit_code == 0
        assert "degraded" in result.output

    def test_bad_config(self, runner, monkeypatch):
        monkeypatch.setenv("SITEIMG_QUALITY", "500")
        result = runner.invoke(cli, ["optimize", "https://example.com/x.jpg"])
        assert result.exit_code == 2


class TestBatchCommand:
    def test_batch(self, runner, public_dir, tmp_path):
        manifest = tmp_path / "images.yaml"
        manifest.write_text(
            "images:\n"
            "  - src: /images/hero.png\n"
            "    preset: hero\n"
            "  - src: /images/hero.png\n"
            "    preset: hero\n"
            "  - src: https://cdn.example.com/a.jpg\n"
        )
        result = runner.invoke(
            cli,
            [
                "batch", str(manifest),
                "--public-dir", str(public_dir), "--out-dir", str(tmp_path / "out"),
            ],
        )
        assert result.exit_code == 0
        assert "Cache Statistics" in result.output
        assert "Optimized Images" in result.output

    def test_unknown_preset(self, runner, tmp_path):
        manifest = tmp_path / "images.yaml"
        manifest.write_text("images:\n  - src: /a.png\n    preset: banner\n")
        result = runner.invoke(cli, ["batch", str(manifest)])
        assert result.exit_code == 1
        assert "Unknown preset" in result.output

    def test_invalid_manifest(self, runner, tmp_path):
        manifest = tmp_path / "images.yaml"
        manifest.write_text("pictures: []\n")
        result = runner.invoke(cli, ["batch", str(manifest)])
        assert result.exit_code == 1

    def test_missing_manifest(self, runner):
        result = runner.invoke(cli, ["batch", "nonexistent.yaml"])
        assert result.exit_code != 0


class TestValidateCommand:
    def test_all_valid(self, runner):
        result = runner.invoke(cli, ["validate", "/a.png", "./b.png", "https://x/y.png"])
        assert result.exit_code == 0
        assert result.output.count("valid") == 3

    def test_invalid_path(self, runner):
        result = runner.invoke(cli, ["validate", "/a.png", "a.png"])
        assert result.exit_code == 1
        assert "invalid" in result.output
