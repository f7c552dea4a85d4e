import pytest

from storyboard import env_loader
from storyboard.env_loader import get_key_info, load_config, validate_key_format
from storyboard.errors import ConfigError, MissingCredential


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in env_loader.KEY_VARS + tuple(env_loader.OVERRIDE_VARS.values()):
        monkeypatch.delenv(var, raising=False)
    # keep a developer's real .env out of the picture
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(env_loader, "load_dotenv", lambda override=True: False)


class TestLoadConfig:

    def test_missing_key_is_fatal(self):
        with pytest.raises(MissingCredential):
            load_config()

    def test_whitespace_key_is_rejected(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "abc def")
        with pytest.raises(MissingCredential):
            load_config()

    def test_fallback_variable(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        assert load_config().api_key == "g-key"

    def test_gemini_key_wins(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        assert load_config().api_key == "gem-key"

    def test_polling_overrides(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        monkeypatch.setenv("STORYBOARD_POLL_INTERVAL", "1.5")
        monkeypatch.setenv("STORYBOARD_MAX_POLL_ATTEMPTS", "3")
        cfg = load_config()
        assert cfg.poll_interval == 1.5
        assert cfg.max_poll_attempts == 3
        assert cfg.video_resolution == "720p"

    def test_malformed_interval_names_variable(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        monkeypatch.setenv("STORYBOARD_POLL_INTERVAL", "fast")
        with pytest.raises(ConfigError, match="STORYBOARD_POLL_INTERVAL"):
            load_config()

    def test_fractional_attempts_rejected(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
        monkeypatch.setenv("STORYBOARD_MAX_POLL_ATTEMPTS", "2.5")
        with pytest.raises(ConfigError) as exc:
            load_config()
        assert "STORYBOARD_MAX_POLL_ATTEMPTS" in str(exc.value)
        assert "STORYBOARD_POLL_INTERVAL" not in str(exc.value)


class TestKeyHelpers:

    def test_validate_key_format(self):
        assert validate_key_format("AIzaSyExample")
        assert not validate_key_format("")
        assert not validate_key_format("   ")
        assert not validate_key_format("AIza Sy")

    def test_key_info_never_leaks_key(self):
        info = get_key_info("AIzaSySecret")
        assert "AIzaSySecret" not in info
        assert info.startswith("key_len=12")
        assert get_key_info("") == "no key"
