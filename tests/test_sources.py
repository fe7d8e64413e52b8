"""Tests for _sources.py: process env, .env files and the fake source."""

from envcheck._sources import EnvSource, FakeEnvSource, ProcessEnvSource, read_env_files


def _write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestReadEnvFiles:
    def test_reads_quoted_values(self, tmp_path):
        env = _write(tmp_path / ".env", 'DATABASE_URL="postgresql://localhost/db"\nPORT=8000\n')
        assert read_env_files([env]) == {"DATABASE_URL": "postgresql://localhost/db", "PORT": "8000"}

    def test_earlier_file_wins(self, tmp_path):
        local = _write(tmp_path / ".env.local", "PORT=9000\n")
        base = _write(tmp_path / ".env", "PORT=8000\nDEBUG=1\n")
        assert read_env_files([local, base]) == {"PORT": "9000", "DEBUG": "1"}

    def test_missing_file_skipped(self, tmp_path):
        assert read_env_files([tmp_path / "absent.env"]) == {}

    def test_keys_without_value_ignored(self, tmp_path):
        env = _write(tmp_path / ".env", "BARE\nSET=1\n")
        assert read_env_files([env]) == {"SET": "1"}


class TestProcessEnvSource:
    def test_protocol(self):
        assert isinstance(ProcessEnvSource(), EnvSource)

    def test_environment_beats_file(self, tmp_path):
        env = _write(tmp_path / ".env", "PORT=8000\nDEBUG=1\n")
        source = ProcessEnvSource([env], environ={"PORT": "9000"})
        assert source.snapshot() == {"PORT": "9000", "DEBUG": "1"}

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("ENVCHECK_TEST_VALUE", "from-os")
        assert ProcessEnvSource().snapshot()["ENVCHECK_TEST_VALUE"] == "from-os"

    def test_snapshot_is_a_copy(self):
        environ = {"A": "1"}
        snapshot = ProcessEnvSource(environ=environ).snapshot()
        snapshot["A"] = "2"
        assert environ == {"A": "1"}


class TestFakeEnvSource:
    def test_protocol(self):
        assert isinstance(FakeEnvSource(), EnvSource)

    def test_env_over_file(self):
        source = FakeEnvSource(env={"PORT": "9000"}, file={"PORT": "8000", "DEBUG": "1"})
        assert source.snapshot() == {"PORT": "9000", "DEBUG": "1"}

    def test_mutation_helpers(self):
        source = FakeEnvSource(env={"A": "1"})
        source.set_env("B", "2")
        source.set_file("C", "3")
        source.unset_env("A")
        assert source.snapshot() == {"B": "2", "C": "3"}

    def test_input_mapping_not_shared(self):
        env = {"A": "1"}
        FakeEnvSource(env=env).set_env("A", "2")
        assert env == {"A": "1"}
