from pathlib import Path

import pytest

from localnet_bench.config import BenchSettings, load_settings
from localnet_bench.models import ConfigError, LocalnetHandle, RunConfiguration


class TestLoadSettings:
    """Test load_settings() layering of defaults, file and environment."""

    def test_defaults_without_file(self, clean_env: None, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.yaml")
        assert settings == BenchSettings()
        assert settings.upstream_ref == "origin/master"

    def test_file_overrides_defaults(self, clean_env: None, tmp_path: Path) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text("benchmark:\n  users: 100\n  branch: main\n")
        settings = load_settings(path)
        assert settings.users == 100
        assert settings.branch == "main"
        assert settings.spawn_rate == 10

    def test_environment_overrides_file(
        self, clean_env: None, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text("benchmark:\n  users: 100\n")
        monkeypatch.setenv("FT_BENCH_USERS", "42")
        monkeypatch.setenv("FT_BENCH_HOST", "127.0.0.1:4040")
        settings = load_settings(path)
        assert settings.users == 42
        assert settings.host == "127.0.0.1:4040"

    def test_empty_file_means_defaults(self, clean_env: None, tmp_path: Path) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text("")
        assert load_settings(path) == BenchSettings()

    def test_unknown_key_raises(self, clean_env: None, tmp_path: Path) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text("benchmark:\n  retries: 3\n")
        with pytest.raises(ConfigError, match="unknown setting 'retries'"):
            load_settings(path)

    def test_non_integer_environment_value_raises(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FT_BENCH_PROCESSES", "eight")
        with pytest.raises(ConfigError, match="FT_BENCH_PROCESSES"):
            load_settings(None)

    def test_section_must_be_mapping(self, clean_env: None, tmp_path: Path) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text("benchmark: [1, 2]\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            load_settings(path)

    def test_shipped_settings_match_defaults(self, clean_env: None) -> None:
        shipped = Path(__file__).parent.parent / "ft_benchmark.yaml"
        assert load_settings(shipped) == BenchSettings()

    @pytest.mark.parametrize(
        "line, setting",
        [
            ("users: 3.7", "users"),
            ("users: '100'", "users"),
            ("users: true", "users"),
            ("branch: 123", "branch"),
            ("branch: yes", "branch"),
        ],
    )
    def test_file_values_of_wrong_type_raise(
        self, clean_env: None, tmp_path: Path, line: str, setting: str
    ) -> None:
        path = tmp_path / "bench.yaml"
        path.write_text(f"benchmark:\n  {line}\n")
        with pytest.raises(ConfigError, match=setting):
            load_settings(path)

    def test_environment_values_are_parsed(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FT_BENCH_SPAWN_RATE", " 25 ")
        monkeypatch.setenv("FT_BENCH_BRANCH", "123")
        settings = load_settings(None)
        assert settings.spawn_rate == 25
        assert settings.branch == "123"

    def test_missing_required_file_raises(self, clean_env: None, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Settings file not found"):
            load_settings(tmp_path / "missing.yaml", required=True)


class TestRunConfiguration:
    """Test RunConfiguration.resolve() fail-fast behaviour."""

    def _handle(self, home: Path) -> LocalnetHandle:
        return LocalnetHandle(
            home=home,
            binary_path=home / "bin",
            num_nodes=1,
            num_shards=1,
            rpc_host="127.0.0.1:3030",
        )

    def test_resolves_key_from_localnet(self, tmp_path: Path) -> None:
        key = tmp_path / "localnet" / "node0" / "validator_key.json"
        key.parent.mkdir(parents=True)
        key.write_text("{}")
        run_config = RunConfiguration.resolve(BenchSettings(), self._handle(tmp_path))
        assert run_config.funding_key == key
        assert run_config.host == "127.0.0.1:3030"
        assert (run_config.users, run_config.spawn_rate, run_config.processes) == (3500, 10, 8)

    def test_missing_key_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Validator key not found"):
            RunConfiguration.resolve(BenchSettings(), self._handle(tmp_path))

    def test_non_positive_users_raises(self, tmp_path: Path) -> None:
        key = tmp_path / "localnet" / "node0" / "validator_key.json"
        key.parent.mkdir(parents=True)
        key.write_text("{}")
        with pytest.raises(ConfigError, match="users must be positive"):
            RunConfiguration.resolve(BenchSettings(users=0), self._handle(tmp_path))
