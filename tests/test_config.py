"""
Tests for hardener.config — config loading and defaults.
"""

from pathlib import Path

from hardener.config import DEFAULTS, load_config


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        missing = tmp_path / "nonexistent" / "config.toml"
        assert load_config(path=missing) == DEFAULTS

    def test_valid_toml(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text(
            'policy_dir = "/etc/hardener/policies"\n'
            'snapshot_dir = "/var/lib/hardener"\n'
            "run_timeout = 120\n"
            'log_level = "debug"\n'
        )
        result = load_config(path=cfg)
        assert result == {
            "policy_dir": Path("/etc/hardener/policies"),
            "snapshot_dir": Path("/var/lib/hardener"),
            "run_timeout": 120,
            "log_level": "DEBUG",
        }

    def test_tilde_expanded(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text('snapshot_dir = "~/snaps"\n')
        assert load_config(path=cfg)["snapshot_dir"] == Path.home() / "snaps"

    def test_malformed_toml_returns_defaults(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text("run_timeout = [not valid toml\n")
        assert load_config(path=cfg) == DEFAULTS

    def test_bad_key_falls_back_alone(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text('run_timeout = "soon"\nsnapshot_dir = "out"\n')
        result = load_config(path=cfg)
        assert result["run_timeout"] == DEFAULTS["run_timeout"]
        assert result["snapshot_dir"] == Path("out")

    def test_non_positive_timeout_ignored(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text("run_timeout = 0\n")
        assert load_config(path=cfg)["run_timeout"] == 300

    def test_boolean_timeout_ignored(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text("run_timeout = true\n")
        assert load_config(path=cfg)["run_timeout"] == 300

    def test_unknown_log_level_ignored(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text('log_level = "LOUD"\n')
        assert load_config(path=cfg)["log_level"] == "WARNING"

    def test_unreadable_file_returns_defaults(self, tmp_path, monkeypatch):
        cfg = tmp_path / "config.toml"
        cfg.write_text("run_timeout = 10\n")

        def deny(self):
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_bytes", deny)
        assert load_config(path=cfg) == DEFAULTS

    def test_defaults_not_mutated(self, tmp_path):
        cfg = tmp_path / "config.toml"
        cfg.write_text("run_timeout = 10\n")
        load_config(path=cfg)
        assert DEFAULTS["run_timeout"] == 300
