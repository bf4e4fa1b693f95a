"""Tests for configuration loading, saving and environment overrides."""

import pytest
import yaml

from gitbin.config import apply_env_overrides, load_config, parse_protocol, save_config
from gitbin.context import ProjectContext
from gitbin.errors import ConfigError
from gitbin.models import StoreConfiguration


@pytest.fixture
def ctx(tmp_path):
    return ProjectContext.init(tmp_path)


class TestSaveLoad:

    def test_round_trip_without_secrets(self, ctx):
        """Credentials are not written unless asked for."""
        config = StoreConfiguration(
            bucket="binaries",
            region="eu-west-1",
            access_key="AKIA",
            secret_key="hunter2",
        )

        save_config(config, ctx)

        on_disk = yaml.safe_load(ctx.config_path.read_text())
        assert on_disk["bucket"] == "binaries"
        assert "access_key" not in on_disk
        assert "secret_key" not in on_disk

        loaded = load_config(ctx, environ={})
        assert loaded.bucket == "binaries"
        assert loaded.region == "eu-west-1"
        assert loaded.access_key == ""

    def test_round_trip_with_secrets(self, ctx):
        config = StoreConfiguration(bucket="b", access_key="AKIA", secret_key="s3cr3t")

        save_config(config, ctx, include_secrets=True)

        assert load_config(ctx, environ={}) == config

    def test_missing_config(self, ctx):
        with pytest.raises(ConfigError, match="git-bin init"):
            load_config(ctx, environ={})

    def test_invalid_yaml(self, ctx):
        ctx.config_path.write_text("bucket: [unclosed\n")
        with pytest.raises(ConfigError, match="Cannot parse"):
            load_config(ctx, environ={})

    def test_not_a_mapping(self, ctx):
        ctx.config_path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(ctx, environ={})

    def test_validation_errors_become_config_errors(self, ctx):
        ctx.config_path.write_text("bucket: ''\nprovider: gcs\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(ctx, environ={})
        assert "bucket" in str(exc_info.value)
        assert "provider" in str(exc_info.value)

    def test_default_context_uses_cwd(self, ctx, monkeypatch):
        save_config(StoreConfiguration(bucket="from-cwd"), ctx)
        subdir = ctx.root / "nested" / "dir"
        subdir.mkdir(parents=True)
        monkeypatch.chdir(subdir)

        assert load_config(environ={}).bucket == "from-cwd"


class TestEnvironmentOverrides:

    def test_credentials_from_environment(self, ctx):
        save_config(StoreConfiguration(bucket="b"), ctx)

        config = load_config(ctx, environ={
            "GITBIN_ACCESS_KEY": "AKIAENV",
            "GITBIN_SECRET_KEY": "envsecret",
        })

        assert config.access_key == "AKIAENV"
        assert config.secret_key == "envsecret"

    def test_environment_wins_over_file(self, ctx):
        save_config(StoreConfiguration(bucket="b", access_key="file"), ctx, include_secrets=True)

        config = load_config(ctx, environ={"GITBIN_ACCESS_KEY": "env"})

        assert config.access_key == "env"

    def test_protocol_override(self, ctx):
        save_config(StoreConfiguration(bucket="b"), ctx)

        assert load_config(ctx, environ={"GITBIN_PROTOCOL": "http"}).secure is False
        assert load_config(ctx, environ={"GITBIN_PROTOCOL": "HTTPS"}).secure is True

    def test_empty_values_ignored(self):
        assert apply_env_overrides({"bucket": "b"}, {"GITBIN_ACCESS_KEY": ""}) == {"bucket": "b"}

    def test_reads_process_environment_by_default(self, monkeypatch):
        monkeypatch.setenv("GITBIN_SECRET_KEY", "from-os")
        assert apply_env_overrides({})["secret_key"] == "from-os"


@pytest.mark.parametrize("value, expected", [
    ("HTTPS", True), ("https", True), (" Http ", False), ("HTTP", False),
])
def test_parse_protocol(value, expected):
    assert parse_protocol(value) is expected


def test_parse_protocol_rejects_other_values():
    with pytest.raises(ConfigError):
        parse_protocol("ftp")
