"""
Configuration management for the deal extraction engine.

Loads DEAL_* settings from environment variables with defaults matching the
engine's documented behaviour. The engine itself never validates options;
callers can use ExtractionConfig.validate() before invoking it.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / '.env'
if _env_file.exists():
    load_dotenv(_env_file)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


class ExtractionConfig:
    """Configuration for boundary detection and field extraction, loaded from environment."""

    # Boundary detection
    MIN_BOUNDARY_CONFIDENCE: float = float(os.getenv('DEAL_MIN_BOUNDARY_CONFIDENCE', '0.3'))
    MAX_BOUNDARIES: int = int(os.getenv('DEAL_MAX_BOUNDARIES', '100'))
    MERGE_OVERLAPPING: bool = _env_bool('DEAL_MERGE_OVERLAPPING', 'true')

    # Field extraction
    MIN_DEAL_CONFIDENCE: float = float(os.getenv('DEAL_MIN_DEAL_CONFIDENCE', '0.3'))
    DEDUPLICATE: bool = _env_bool('DEAL_DEDUPLICATE', 'true')
    DEDUPLICATION_THRESHOLD: float = float(os.getenv('DEAL_DEDUPLICATION_THRESHOLD', '0.85'))

    # Logging
    LOG_LEVEL: str = os.getenv('DEAL_LOG_LEVEL', 'INFO')
    LOG_JSON: bool = _env_bool('DEAL_LOG_JSON', 'false')

    @classmethod
    def validate(cls) -> list[str]:
        """
        Validate that configured values are usable.

        Returns:
            List of human-readable problems (empty when the config is sane).
        """
        problems = []
        for name in (
            'MIN_BOUNDARY_CONFIDENCE',
            'MIN_DEAL_CONFIDENCE',
            'DEDUPLICATION_THRESHOLD',
        ):
            value = getattr(cls, name)
            if not 0.0 <= value <= 1.0:
                problems.append(f'DEAL_{name} must be between 0 and 1 (got {value})')
        if cls.MAX_BOUNDARIES <= 0:
            problems.append(f'DEAL_MAX_BOUNDARIES must be positive (got {cls.MAX_BOUNDARIES})')
        return problems


# Singleton config instance
extraction_config = ExtractionConfig()
