# doc_redaction/core/loader.py

"""Pattern catalog loader for the redaction engine."""

import yaml
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

from doc_redaction.core.definitions import RedactionCategory
from doc_redaction.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS_PATH = Path(__file__).parent / "patterns.yaml"

_REQUIRED_KEYS = ("category", "name", "regex")


class PatternLoader:
    """Singleton loader for the pattern catalog.

    Loads patterns.yaml once and caches it for the application lifecycle.
    """

    _instance: Optional["PatternLoader"] = None
    _config: Dict[str, Any] = {}
    _loaded: bool = False

    def __new__(cls) -> "PatternLoader":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if not PatternLoader._loaded:
            self._load_config(DEFAULT_PATTERNS_PATH)

    @classmethod
    def get_instance(cls) -> "PatternLoader":
        """Returns the singleton instance of PatternLoader."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @staticmethod
    def read(config_path: Path) -> List[Dict[str, Any]]:
        """Reads and validates a pattern file without touching the cache.

        Args:
            config_path: Path to a YAML file with a 'patterns' list

        Returns:
            Validated pattern definitions in file order

        Raises:
            ConfigurationError: If file is missing, invalid, or empty.
        """
        if not config_path.exists():
            error_msg = f"Configuration file not found: {config_path}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to parse {config_path.name}: {e}") from e

        if not config:
            raise ConfigurationError("Configuration file is empty or invalid")

        patterns = config.get("patterns") if isinstance(config, dict) else None
        if not patterns or not isinstance(patterns, list):
            error_msg = "Missing required configuration section: patterns"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        for index, entry in enumerate(patterns):
            missing = [k for k in _REQUIRED_KEYS if k not in (entry or {})]
            if missing:
                raise ConfigurationError(
                    f"Pattern #{index} is missing keys: {missing}"
                )
            try:
                RedactionCategory(entry["category"])
            except ValueError as e:
                raise ConfigurationError(
                    f"Pattern '{entry['name']}' has unknown category "
                    f"'{entry['category']}'"
                ) from e

        return patterns

    def _load_config(self, config_path: Path) -> None:
        patterns = self.read(config_path)
        PatternLoader._config = {"patterns": patterns}
        PatternLoader._loaded = True
        logger.info(
            "Pattern catalog loaded successfully",
            extra={"config_path": str(config_path), "pattern_count": len(patterns)},
        )

    def get_patterns(self) -> List[Dict[str, Any]]:
        """Returns all pattern definitions in catalog order."""
        return list(self._config.get("patterns", []))

    def get_patterns_for(self, category: RedactionCategory) -> List[Dict[str, Any]]:
        """Returns the pattern definitions declared for one category.

        Args:
            category: Category to filter on

        Returns:
            List of pattern dictionaries with 'name', 'regex', 'score' keys
        """
        return [
            p for p in self.get_patterns() if p["category"] == category.value
        ]
