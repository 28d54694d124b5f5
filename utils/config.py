# utils/config.py
"""
Centralized Configuration Management

Version: 1.0.0
Features:
- Support both local (.env) and Streamlit Cloud (secrets.toml)
- Singleton pattern for efficiency
- Type-safe getters with defaults
- Environment detection
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any
from dataclasses import dataclass

# Initialize logger
logger = logging.getLogger(__name__)


def is_running_on_streamlit_cloud() -> bool:
    """Detect if running on Streamlit Cloud"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


@dataclass
class StorageConfig:
    """Key-value storage configuration container"""
    url: str = "sqlite:///sales_tracker.db"
    table: str = "key_value_store"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'url': self.url,
            'table': self.table,
        }


class Config:
    """
    Centralized configuration management

    Usage:
        from utils.config import config

        # Get storage config
        storage_config = config.get_storage_config()

        # Get app settings
        tz_name = config.get_app_setting("TIMEZONE", "UTC")

        # Check feature flags
        if config.is_feature_enabled("DEBUG_MODE"):
            ...
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()
        self._load_config()
        self._initialized = True

    def _load_config(self):
        """Load configuration based on environment"""
        if self.is_cloud:
            self._load_cloud_config()
        else:
            self._load_local_config()

        self._load_app_config()
        self._log_config_status()

    def _load_cloud_config(self):
        """Load configuration from Streamlit Cloud secrets"""
        import streamlit as st

        storage_secrets = st.secrets.get("STORAGE", {})
        self._storage_config = StorageConfig(
            url=storage_secrets.get("URL", StorageConfig.url),
            table=storage_secrets.get("TABLE", StorageConfig.table),
        )

        logger.info("☁️ Running in STREAMLIT CLOUD")

    def _load_local_config(self):
        """Load configuration from local .env file"""
        # Find and load .env file
        env_paths = [
            Path.cwd() / ".env",
            Path(__file__).parent.parent / ".env",
        ]

        for env_path in env_paths:
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        self._storage_config = StorageConfig(
            url=os.getenv("STORAGE_URL", StorageConfig.url),
            table=os.getenv("STORAGE_TABLE", StorageConfig.table),
        )

        if not self._storage_config.url:
            logger.error("Missing storage URL")
            raise ValueError("Missing STORAGE_URL. Please check .env file.")

        logger.info("💻 Running in LOCAL environment")

    def _load_app_config(self):
        """Load application-specific settings"""
        self._app_config = {
            # Localization
            "TIMEZONE": os.getenv("TIMEZONE", "UTC"),
            "CURRENCY_SYMBOL": os.getenv("CURRENCY_SYMBOL", "$"),

            # Board
            "RECENT_DEALS_SHOWN": int(os.getenv("RECENT_DEALS_SHOWN", "5")),

            # Feature flags
            "ENABLE_CHARTS": os.getenv("ENABLE_CHARTS", "true").lower() == "true",
            "ENABLE_EXCEL_EXPORT": os.getenv("ENABLE_EXCEL_EXPORT", "true").lower() == "true",
            "ENABLE_DEBUG_MODE": os.getenv("ENABLE_DEBUG_MODE", "false").lower() == "true",
        }

    def _log_config_status(self):
        """Log configuration status"""
        logger.info(f"✅ Storage: {self._storage_config.url} (table={self._storage_config.table})")
        logger.info(f"✅ Timezone: {self._app_config['TIMEZONE']}")

    # ==================== PUBLIC GETTERS ====================

    def get_storage_config(self) -> Dict[str, Any]:
        """Get storage configuration as dictionary"""
        return self._storage_config.to_dict()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        """Get application setting with default"""
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """Check if feature is enabled"""
        key = f"ENABLE_{feature.upper()}"
        return self._app_config.get(key, True)


# ==================== SINGLETON INSTANCE ====================

config = Config()

# ==================== EXPORTS ====================

__all__ = [
    'config',
    'Config',
    'StorageConfig',
]
