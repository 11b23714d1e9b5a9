"""Configuration and shared objects for the Pitch Panda pipeline."""

import logging
import os
import sys
from dotenv import load_dotenv
from langchain_openai import ChatOpenAI

# Fix Windows console encoding for Unicode support
if sys.platform == "win32":
    import codecs

    sys.stdout = codecs.getwriter("utf-8")(sys.stdout.buffer, "strict")
    sys.stderr = codecs.getwriter("utf-8")(sys.stderr.buffer, "strict")

# Load environment variables once
load_dotenv()

# Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_VISION_MODEL = os.getenv("OPENAI_VISION_MODEL", "gpt-4o")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-4o")
TAVILY_API_KEY = os.getenv("TAVILY_API_KEY")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

OUTPUT_DIR = os.getenv("PITCH_PANDA_OUTPUT_DIR", "output")
DB_PATH = os.getenv("PITCH_PANDA_DB_PATH", os.path.join(OUTPUT_DIR, "pitchpanda_db.json"))

MAX_WEBSITE_CHARS = int(os.getenv("MAX_WEBSITE_CHARS", "10000"))
MAX_CONTEXT_CHARS = int(os.getenv("MAX_CONTEXT_CHARS", "40000"))
SLIDE_CONCURRENCY = int(os.getenv("SLIDE_CONCURRENCY", "3"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "3"))
LLM_RETRY_BASE_DELAY = float(os.getenv("LLM_RETRY_BASE_DELAY", "1.0"))
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "20"))

USER_AGENT = "Mozilla/5.0 (compatible; PitchPanda/1.0; +https://pitchpanda.local)"
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# Logging setup
logger = logging.getLogger("pitch_panda")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s - %(message)s"))
    logger.addHandler(handler)
logger.setLevel(LOG_LEVEL)
logger.propagate = False


def validate_api_keys() -> list[str]:
    """Return a list of missing API keys required to run the pipeline."""
    missing = []
    if not (OPENAI_API_KEY or OPENROUTER_API_KEY):
        missing.append("OPENAI_API_KEY or OPENROUTER_API_KEY")
    return missing


def create_llm(temperature: float = 0.1, max_tokens: int | None = None, model: str | None = None):
    """Instantiate ChatOpenAI with OpenRouter when available, else OpenAI."""
    if OPENROUTER_API_KEY:
        return ChatOpenAI(
            model=model or OPENROUTER_MODEL,
            api_key=OPENROUTER_API_KEY,
            base_url=OPENROUTER_BASE_URL,
            temperature=temperature,
            max_tokens=max_tokens,
        )
    return ChatOpenAI(
        model=model or OPENAI_MODEL,
        temperature=temperature,
        max_tokens=max_tokens,
        api_key=OPENAI_API_KEY,
    )


def create_vision_llm(temperature: float = 0.1, max_tokens: int = 4096):
    """Vision-capable model for slide images."""
    model = OPENROUTER_MODEL if OPENROUTER_API_KEY else OPENAI_VISION_MODEL
    return create_llm(temperature=temperature, max_tokens=max_tokens, model=model)


_search_tool = None


def search_enabled() -> bool:
    return bool(TAVILY_API_KEY)


def get_search_tool():
    """Lazily build the Tavily search tool; None when no key is configured."""
    global _search_tool
    if not TAVILY_API_KEY:
        return None
    if _search_tool is None:
        from langchain_community.tools.tavily_search import TavilySearchResults

        _search_tool = TavilySearchResults(api_key=TAVILY_API_KEY, max_results=5)
    return _search_tool
