"""
Configuration management for the meeting task tool client.

Loads settings from environment variables with sensible defaults.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / '.env'
if _env_file.exists():
    load_dotenv(_env_file)


def supabase_configured(url: str | None, key: str | None) -> bool:
    """False when Supabase settings are missing or still template placeholders."""
    if not url or not key:
        return False
    return 'your-project' not in url and 'your-anon-key' not in key


class Config:
    """Configuration settings loaded from environment."""

    # Backend REST API
    API_URL: str = os.getenv('API_URL', 'http://localhost:3001/api/v1')
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv('HTTP_TIMEOUT_SECONDS', '30'))
    MAX_RETRIES: int = int(os.getenv('MAX_RETRIES', '2'))

    # Supabase auth
    SUPABASE_URL: str = os.getenv('SUPABASE_URL', '')
    SUPABASE_ANON_KEY: str = os.getenv('SUPABASE_ANON_KEY', '')

    # Persisted store state
    STATE_DIR: str = os.getenv('STATE_DIR', str(Path.home() / '.meeting-tasks'))

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def validate(cls) -> list[str]:
        """
        Validate that required configuration is present.

        Missing Supabase settings are reported even though the client can
        run against the development auth provider without them.

        Returns:
            List of missing required configuration keys
        """
        missing = []
        if not cls.API_URL:
            missing.append('API_URL')
        if not cls.SUPABASE_URL:
            missing.append('SUPABASE_URL')
        if not cls.SUPABASE_ANON_KEY:
            missing.append('SUPABASE_ANON_KEY')
        return missing


# Singleton config instance
config = Config()
