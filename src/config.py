"""
Call assistant configuration, read from the environment (and .env).

Agent identity, data file locations, quote floors, and form settings
are configurable here. Script content and carrier data live in JSON
files referenced by path, never in code.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from src.logging_context import install_session_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] [%(session_id)s] %(levelname)s: %(message)s"

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class AgentConfig:
    """Identity of the licensed agent running the call."""

    name: str = os.getenv("AGENT_NAME", "")
    npn: str = os.getenv("AGENT_NPN", "")
    agent_id: str = os.getenv("AGENT_ID", "local-agent")


@dataclass(frozen=True)
class PathConfig:
    """Locations of the script document, carrier reference, and session store."""

    script_path: str = os.getenv(
        "SCRIPT_PATH", os.path.join(_PROJECT_ROOT, "data", "script_sections.json")
    )
    carriers_path: str = os.getenv(
        "CARRIERS_PATH", os.path.join(_PROJECT_ROOT, "data", "carriers.json")
    )
    session_store_path: str = os.getenv(
        "SESSION_STORE_PATH", os.path.join(_PROJECT_ROOT, ".session", "customer_data.json")
    )


@dataclass(frozen=True)
class ScriptConfig:
    """Script rendering and navigation settings."""

    placeholder_window: int = _safe_int("PLACEHOLDER_WINDOW", "50")
    medical_section_id: str = os.getenv("MEDICAL_SECTION_ID", "medical_questions")


@dataclass(frozen=True)
class QuoteConfig:
    """Floors and fallbacks for the quote estimator."""

    min_coverage: int = _safe_int("MIN_COVERAGE", "5000")
    min_monthly_premium: int = _safe_int("MIN_MONTHLY_PREMIUM", "25")
    default_age: int = _safe_int("DEFAULT_AGE", "65")


@dataclass(frozen=True)
class FormConfig:
    """Third-party application form settings."""

    google_form_url: str = os.getenv("GOOGLE_FORM_URL", "")
    company_name: str = os.getenv("FORM_COMPANY_NAME", "Final Expense Select")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    agent: AgentConfig = field(default_factory=AgentConfig)
    paths: PathConfig = field(default_factory=PathConfig)
    script: ScriptConfig = field(default_factory=ScriptConfig)
    quotes: QuoteConfig = field(default_factory=QuoteConfig)
    forms: FormConfig = field(default_factory=FormConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.script.placeholder_window < 1:
        raise ValueError(
            f"PLACEHOLDER_WINDOW must be >= 1, got {config.script.placeholder_window}"
        )
    if config.quotes.min_coverage < 0:
        raise ValueError(
            f"MIN_COVERAGE must be >= 0, got {config.quotes.min_coverage}"
        )
    if config.quotes.min_monthly_premium < 0:
        raise ValueError(
            f"MIN_MONTHLY_PREMIUM must be >= 0, got {config.quotes.min_monthly_premium}"
        )
    if not 18 <= config.quotes.default_age <= 120:
        raise ValueError(
            f"DEFAULT_AGE must be between 18 and 120, got {config.quotes.default_age}"
        )
    if config.forms.google_form_url and not config.forms.google_form_url.startswith(
        ("http://", "https://")
    ):
        raise ValueError(
            f"GOOGLE_FORM_URL must be an http(s) URL, got {config.forms.google_form_url!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_session_filter()
    logger.info("Configuration loaded (script: %s)", config.paths.script_path)
    return config


# Singleton instance
settings = load_config()
