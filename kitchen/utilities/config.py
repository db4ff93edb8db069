"""Configuration management for the Kitchen Buddy application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'info').upper()
CORS_ORIGINS: Final[list[str]] = [
    o.strip() for o in os.getenv('CORS_ORIGINS', 'http://localhost:3000').split(',') if o.strip()
]

# AI provider
OPENAI_API_KEY: Final[str] = os.getenv('OPENAI_API_KEY', '')
OPENAI_MODEL: Final[str] = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
OPENAI_VISION_MODEL: Final[str] = os.getenv('OPENAI_VISION_MODEL', 'gpt-4o-mini')

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DATA_DIR', str(BASE_DIR / 'data'))).resolve()
