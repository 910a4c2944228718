# src/configs/config.py
import yaml
from pathlib import Path
from functools import lru_cache

from src.configs.settings import get_settings
from src.monitoring.logging import LoggingOptions

settings = get_settings()


class Config:
    """
    Configuration for tracker input loading.

    Values come from inputs.yaml; INPUTS_* environment variables win.
    """

    # 1. Setup Base Paths
    # This points to src/configs/
    CONFIG_DIR = Path(__file__).parent.resolve()

    # 2. Define File Paths
    INPUTS_CONFIG_PATH = CONFIG_DIR / "inputs.yaml"

    DEFAULT_ENCODING = "UTF-8"

    @classmethod
    @lru_cache
    def load_inputs_config(cls) -> dict:
        """Loads the YAML configuration for input loading."""
        if not cls.INPUTS_CONFIG_PATH.exists():
            raise FileNotFoundError(f"Missing config at {cls.INPUTS_CONFIG_PATH}")

        with open(cls.INPUTS_CONFIG_PATH, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_default_encoding(cls) -> str:
        """Returns the encoding assumed when a collector does not supply one."""
        if settings.DEFAULT_ENCODING:
            return settings.DEFAULT_ENCODING
        inputs = cls.load_inputs_config().get("inputs") or {}
        return inputs.get("default_encoding") or cls.DEFAULT_ENCODING

    @classmethod
    def get_logging_options(cls) -> LoggingOptions:
        """Builds LoggingOptions from the logging section."""
        section = cls.load_inputs_config().get("logging") or {}
        level = settings.LOG_LEVEL or section.get("level", "INFO")
        json_logs = settings.JSON_LOGS
        if json_logs is None:
            json_logs = bool(section.get("json_logs", False))
        return LoggingOptions(level=str(level), json_logs=json_logs)
