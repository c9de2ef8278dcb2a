"""Tests for client and web edge configuration."""

import os
from unittest.mock import patch

from meeting_tasks.clients.auth_provider import DevAuthProvider, create_auth_provider
from meeting_tasks.config import Config, supabase_configured
from meeting_tasks.web.config import Settings


class TestWebSettings:
    def test_settings_load_from_env(self):
        env = {
            "API_URL": "https://api.example.com/api/v1",
            "SUPABASE_URL": "https://abc.supabase.co",
            "SUPABASE_ANON_KEY": "anon-key",
            "COOKIE_SECURE": "true",
        }
        with patch.dict(os.environ, env, clear=False):
            settings = Settings()
            assert settings.API_URL == "https://api.example.com/api/v1"
            assert settings.SUPABASE_URL == "https://abc.supabase.co"
            assert settings.COOKIE_SECURE is True

    def test_settings_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings()
            assert settings.API_URL == "http://localhost:3001/api/v1"
            assert settings.ACCESS_TOKEN_COOKIE == "sb-access-token"
            assert settings.REFRESH_TOKEN_COOKIE == "sb-refresh-token"
            assert settings.MAX_RETRIES == 2


class TestSupabaseConfigured:
    def test_real_values(self):
        assert supabase_configured("https://abc.supabase.co", "eyJhbGciOi")

    def test_missing_values(self):
        assert not supabase_configured("", "key")
        assert not supabase_configured("https://abc.supabase.co", None)

    def test_placeholders(self):
        assert not supabase_configured("https://your-project.supabase.co", "key")
        assert not supabase_configured("https://abc.supabase.co", "your-anon-key")

    def test_placeholder_selects_dev_provider(self):
        provider = create_auth_provider("https://your-project.supabase.co", "your-anon-key")

        assert isinstance(provider, DevAuthProvider)


class TestClientConfig:
    def test_validate_reports_missing_supabase(self):
        with patch.object(Config, "SUPABASE_URL", ""), patch.object(Config, "SUPABASE_ANON_KEY", ""):
            missing = Config.validate()

        assert "SUPABASE_URL" in missing
        assert "SUPABASE_ANON_KEY" in missing

    def test_validate_complete(self):
        with patch.object(Config, "SUPABASE_URL", "https://abc.supabase.co"), \
                patch.object(Config, "SUPABASE_ANON_KEY", "key"), \
                patch.object(Config, "API_URL", "http://localhost:3001/api/v1"):
            assert Config.validate() == []
