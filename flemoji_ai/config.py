"""
Configuration settings for the Flemoji AI assistant.

All API keys are OPTIONAL - routing, tools and normalization work without them.
Model calls require OPENAI_API_KEY (or ANTHROPIC_API_KEY with AI_PROVIDER=anthropic).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
# Look for .env file in project root (parent of flemoji_ai/)
_project_root = Path(__file__).parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=_env_path)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# ===================
# API Keys (All Optional)
# ===================

# OpenAI API key - required only for model calls
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Anthropic API key - used when AI_PROVIDER=anthropic
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
ANTHROPIC_MODEL = os.getenv("ANTHROPIC_MODEL", "claude-3-sonnet-20240229")

# Chat model backend for the agents: "openai" or "anthropic"
AI_PROVIDER = os.getenv("AI_PROVIDER", "openai").strip().lower()

# Public domain serving audio and image files (e.g. "asset.flemoji.com")
R2_PUBLIC_URL = os.getenv("R2_PUBLIC_URL")

# ===================
# Project Paths
# ===================

PROJECT_ROOT = _project_root
DATA_DIR = PROJECT_ROOT / "data"
CATALOG_PATH = Path(os.getenv("CATALOG_PATH", str(DATA_DIR / "catalog.json")))

# ===================
# Assistant Limits
# ===================

# Rounds of "ask model -> run tools" before the loop gives up
MAX_TOOL_ITERATIONS = _int_env("MAX_TOOL_ITERATIONS", 6)

# Maximum tracks placed in a compiled (virtual) playlist
COMPILED_PLAYLIST_MAX_TRACKS = _int_env("COMPILED_PLAYLIST_MAX_TRACKS", 20)

# Maximum supplementary "other" tracks attached to a track list
MAX_OTHER_TRACKS = _int_env("MAX_OTHER_TRACKS", 5)

# Characters of each tool result echoed back to the model
TOOL_RESULT_CHAR_LIMIT = _int_env("TOOL_RESULT_CHAR_LIMIT", 4000)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# ===================
# Feature Flags
# ===================

def has_openai() -> bool:
    """Check if OpenAI API key is configured."""
    return bool(OPENAI_API_KEY)


def has_anthropic() -> bool:
    """Check if Anthropic API key is configured."""
    return bool(ANTHROPIC_API_KEY)


def has_model_key(provider: str = AI_PROVIDER) -> bool:
    """Check if the key for ``provider``'s chat model is configured."""
    if provider == "anthropic":
        return has_anthropic()
    return has_openai()
