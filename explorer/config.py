import configparser
import os
from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

# Default configuration values
DEFAULT_CONFIG_FILE = "config/settings.ini"
DEFAULT_REST_API_ROOT = "/api"
DEFAULT_EXPLORER_ROOT = "/explorer"
DEFAULT_CORS_ORIGIN = "*"
DEFAULT_CORS_METHODS = ["GET", "HEAD", "OPTIONS"]
DEFAULT_LOG_LEVEL = "INFO"

FALSE_VALUES = ("false", "no", "off", "0")


class Config:
    """Configuration management with INI file and environment variable
    support"""

    def __init__(self, config_file: Optional[str] = None):
        self.config = configparser.ConfigParser()
        self.config_file = config_file or os.environ.get("EXPLORER_CONFIG", DEFAULT_CONFIG_FILE)
        self._load_config()

    def _load_config(self):
        """Load configuration from INI file"""
        if os.path.exists(self.config_file):
            self.config.read(self.config_file)

    def get(self, section: str, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """Get configuration value with environment variable override"""
        # Check environment variable first
        if env_var and env_var in os.environ:
            return os.environ[env_var]

        # Fall back to INI file
        try:
            return self.config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return default

    def getint(self, section: str, key: str, default: Optional[int] = 0, env_var: Optional[str] = None) -> Optional[int]:
        """Get integer configuration value"""
        value = self.get(section, key, default, env_var)
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def getbool(self, section: str, key: str, default: bool = False, env_var: Optional[str] = None) -> bool:
        """Get boolean configuration value"""
        value = self.get(section, key, None, env_var)
        if value is None:
            return default
        return str(value).strip().lower() not in FALSE_VALUES

    def get_enum(self, section: str, key: str, valid_options: list, default: str, env_var: Optional[str] = None) -> str:
        """Get enum configuration value with case-insensitive matching"""
        value = self.get(section, key, default, env_var)

        # Case-insensitive matching
        for option in valid_options:
            if value.upper() == option.upper():
                return option

        # Return default if no match found
        return default


# Global configuration instance
config = Config()


# Convenience functions for common settings
def get_rest_api_root() -> str:
    """Get the mount path of the REST API being documented."""
    return config.get("rest", "api_root", DEFAULT_REST_API_ROOT, "REST_API_ROOT")


def get_explorer_root() -> str:
    """Get the mount path of the documentation endpoints."""
    return config.get("explorer", "root", DEFAULT_EXPLORER_ROOT, "EXPLORER_ROOT")


def get_base_path() -> Optional[str]:
    """Get the advertised basePath override, if any."""
    return config.get("explorer", "base_path", None, "EXPLORER_BASE_PATH") or None


def get_protocol() -> Optional[str]:
    """Get the advertised protocol override (e.g. https behind a TLS terminator)."""
    return config.get("explorer", "protocol", None, "EXPLORER_PROTOCOL") or None


def get_cors_origin() -> Union[bool, str, List[str]]:
    """Get the allowed CORS origin(s); False disables CORS."""
    value = config.get("remoting", "cors_origin", DEFAULT_CORS_ORIGIN, "CORS_ORIGIN")
    value = str(value).strip()
    if value.lower() in FALSE_VALUES:
        return False
    if value in ("*", "true"):
        return True
    origins = [origin.strip() for origin in value.split(",") if origin.strip()]
    return origins[0] if len(origins) == 1 else origins


def get_cors_credentials() -> bool:
    return config.getbool("remoting", "cors_credentials", False, "CORS_CREDENTIALS")


def get_cors_max_age() -> Optional[int]:
    return config.getint("remoting", "cors_max_age", None, "CORS_MAX_AGE")


def get_log_level() -> str:
    """Get logging level configuration."""
    valid_options = ["DEBUG", "INFO", "WARNING", "ERROR"]
    return config.get_enum("logging", "level", valid_options, DEFAULT_LOG_LEVEL, "LOG_LEVEL")


@dataclass
class CorsSettings:
    """Cross-origin policy for the documentation endpoints.

    ``origin`` follows the remoting convention: True reflects the caller's
    Origin, a string or list restricts it, and False turns CORS off.
    """

    origin: Union[bool, str, List[str]] = field(default_factory=get_cors_origin)
    credentials: bool = field(default_factory=get_cors_credentials)
    methods: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_METHODS))
    max_age: Optional[int] = field(default_factory=get_cors_max_age)

    @property
    def enabled(self) -> bool:
        return self.origin is not False

    def to_flask_cors(self) -> dict:
        """Translate into keyword arguments understood by flask_cors.CORS."""
        options = {
            "origins": "*" if self.origin is True else self.origin,
            "methods": self.methods,
            "supports_credentials": self.credentials,
        }
        if self.max_age is not None:
            options["max_age"] = self.max_age
        return options


@dataclass
class HostSettings:
    """Host-level settings the explorer reads when it is mounted."""

    rest_api_root: str = field(default_factory=get_rest_api_root)
    explorer_root: str = field(default_factory=get_explorer_root)
    cors: Union[CorsSettings, bool] = field(default_factory=CorsSettings)

    @property
    def cors_policy(self) -> Optional[CorsSettings]:
        """Effective CORS policy, or None when cross-origin access is disabled."""
        if self.cors is False:
            return None
        if self.cors is True:
            return CorsSettings(origin=True)
        return self.cors if self.cors.enabled else None
