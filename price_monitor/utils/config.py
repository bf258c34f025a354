"""Configuration management for environment variables and application settings."""

import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env_int(var_name: str, default: str) -> int:
    value_str = os.getenv(var_name, default)
    # Strip inline comments and whitespace before int conversion
    if "#" in value_str:
        value_str = value_str.split("#", 1)[0]
    return int(value_str.strip())


def get_env_bool(var_name: str, default: str) -> bool:
    value_str = os.getenv(var_name, default)
    if "#" in value_str:
        value_str = value_str.split("#", 1)[0]
    return value_str.strip().lower() == "true"


# Core configurations
DEBUG = get_env_bool("DEBUG", "False")
LOG_DIR = os.getenv("LOG_DIR", "logs")

# OpenAI Model Settings
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-4o-mini")
LLM_MAX_TOKENS = get_env_int("LLM_MAX_TOKENS", "1500")
LLM_MAX_INPUT_CHARS = get_env_int("LLM_MAX_INPUT_CHARS", "15000")  # Longer fragments are truncated before sending

# Database Settings
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/prices.db")

# Scraper Settings
# Optional: remote browser service (e.g., Browserless.io) instead of a local Chromium
HEADLESS_BROWSER_ENDPOINT = os.getenv("HEADLESS_BROWSER_ENDPOINT")
SCRAPER_NAVIGATION_TIMEOUT_MS = get_env_int("SCRAPER_NAVIGATION_TIMEOUT_MS", "90000")
SCRAPER_SELECTOR_TIMEOUT_MS = get_env_int("SCRAPER_SELECTOR_TIMEOUT_MS", "15000")
SCRAPER_HTTP_FALLBACK = get_env_bool("SCRAPER_HTTP_FALLBACK", "False")  # Plain HTTP fetch if the browser session fails
SCRAPER_USER_AGENT = os.getenv(
    "SCRAPER_USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)
DEFAULT_SITE = os.getenv("DEFAULT_SITE", "terabyteshop")

# Rate limiting
API_RATE_LIMIT_SCRAPE = os.getenv("API_RATE_LIMIT_SCRAPE", "10/minute")  # String, not int/bool
RATE_LIMIT_STORAGE_URI = os.getenv("RATE_LIMIT_STORAGE_URI", "memory://")

# Front end
SERVE_FRONTEND = get_env_bool("SERVE_FRONTEND", "True")
FRONTEND_BUILD_DIR = os.getenv("FRONTEND_BUILD_DIR")  # Overrides the bundled static form when set

if DEBUG:
    print(f"✅ Database: {DATABASE_URL}, model={OPENAI_CHAT_MODEL}, default site={DEFAULT_SITE}")
