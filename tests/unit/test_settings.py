"""
Unit tests for configuration loading.
"""

from pathlib import Path

from filebucket.config.settings import PACKAGE_PUBLIC_DIR, Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults_target_tigris(self, monkeypatch):
        monkeypatch.delenv("AWS_ENDPOINT_URL_S3", raising=False)
        monkeypatch.delenv("AWS_REGION", raising=False)

        settings = Settings(_env_file=None)

        assert settings.aws_endpoint_url_s3 == "https://fly.storage.tigris.dev"
        assert settings.aws_region == "auto"
        assert settings.port == 8080
        assert settings.presign_expiry_seconds == 3600

    def test_reads_bucket_from_environment(self, monkeypatch):
        monkeypatch.setenv("BUCKET_NAME", "my-files")

        assert Settings(_env_file=None).bucket_name == "my-files"

    def test_mock_mode_needs_no_credentials(self, monkeypatch):
        monkeypatch.setenv("STORAGE_MOCK_MODE", "true")

        assert Settings(_env_file=None).validate_required_fields() == []

    def test_real_mode_reports_missing_credentials(self, monkeypatch):
        monkeypatch.setenv("STORAGE_MOCK_MODE", "false")
        monkeypatch.delenv("BUCKET_NAME", raising=False)
        monkeypatch.delenv("AWS_ACCESS_KEY_ID", raising=False)
        monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)

        missing = Settings(_env_file=None).validate_required_fields()

        assert missing == ["BUCKET_NAME", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"]

    def test_cors_origins_are_split(self):
        settings = Settings(_env_file=None, cors_origins="https://a.dev, https://b.dev")

        assert settings.cors_origins_list == ["https://a.dev", "https://b.dev"]

    def test_static_path_defaults_to_bundled_tree(self, monkeypatch):
        monkeypatch.delenv("STATIC_DIR", raising=False)

        settings = Settings(_env_file=None)

        assert settings.static_path == PACKAGE_PUBLIC_DIR
        assert (PACKAGE_PUBLIC_DIR / "index.html").is_file()

    def test_static_path_override(self, tmp_path):
        settings = Settings(_env_file=None, static_dir=str(tmp_path))

        assert settings.static_path == Path(tmp_path)
