"""
Configuration management for the 1Money client

Loads defaults from environment variables and .env file. A ClientConfig is
frozen once built and shared read-only by every call made through a client.
Includes logging configuration with file output and correlation ID support.
"""

import os
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from .errors import ConfigurationError

CLIENT_VERSION = "0.1.0"
USER_AGENT = f"onemoney-python-client/{CLIENT_VERSION}"

API_VERSION = "/v1"

DEFAULT_NETWORK = "mainnet"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_POLL_MAX_ATTEMPTS = 30
DEFAULT_POLL_INTERVAL_SECONDS = 1.0


def _load_env_file(env_file: Optional[Path] = None):
    """Load .env file from project root, or the given file"""
    if env_file is None:
        current = Path(__file__).parent.parent  # onemoney_client package parent
        env_file = current / ".env"

    if env_file.exists():
        load_dotenv(env_file)


# Load .env on module import
_load_env_file()


def _get_env(key: str, default: Optional[str] = "") -> Optional[str]:
    """Get environment variable with default"""
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_env_float(key: str, default: float) -> float:
    """Get environment variable as float"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid float value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get environment variable as int"""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logging.getLogger(__name__).warning(
            f"Invalid int value for {key}='{value}', using default={default}"
        )
        return default


def _get_env_bool(key: str, default: bool) -> bool:
    """Get environment variable as bool"""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def api_path(path: str) -> str:
    """Prefix an endpoint path with the API version"""
    if not path.startswith("/"):
        path = "/" + path
    return f"{API_VERSION}{path}"


@dataclass(frozen=True)
class NetworkConfig:
    """
    Fixed network parameters

    Attributes:
        name: Network name (mainnet, testnet, local)
        base_url: REST API root
        chain_id: Chain id payloads for this network must carry
        is_production: True only for mainnet
    """
    name: str
    base_url: str
    chain_id: int
    is_production: bool = False


# Network name -> parameters. Read-only.
NETWORKS: Mapping[str, NetworkConfig] = MappingProxyType({
    "mainnet": NetworkConfig(
        name="mainnet",
        base_url="https://api.mainnet.1money.network",
        chain_id=21210,
        is_production=True,
    ),
    "testnet": NetworkConfig(
        name="testnet",
        base_url="https://api.testnet.1money.network",
        chain_id=1212101,
    ),
    "local": NetworkConfig(
        name="local",
        base_url="http://127.0.0.1:18555",
        chain_id=1212101,
    ),
})


def resolve_network(name: str) -> NetworkConfig:
    """
    Look up a network by name (case-insensitive)

    Raises:
        ConfigurationError: Unknown network
    """
    network = NETWORKS.get(name.strip().lower()) if isinstance(name, str) else None
    if network is None:
        valid = ", ".join(NETWORKS)
        raise ConfigurationError.invalid("network", f"unknown network '{name}', expected one of: {valid}")
    return network


@dataclass(frozen=True)
class PollConfig:
    """Confirmation polling defaults"""
    max_attempts: int = field(default_factory=lambda: _get_env_int(
        "ONEMONEY_POLL_MAX_ATTEMPTS", DEFAULT_POLL_MAX_ATTEMPTS
    ))
    interval_seconds: float = field(default_factory=lambda: _get_env_float(
        "ONEMONEY_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
    ))

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ConfigurationError.invalid("max_attempts", f"must be >= 1, got {self.max_attempts}")
        if self.interval_seconds < 0:
            raise ConfigurationError.invalid(
                "interval_seconds", f"must be >= 0, got {self.interval_seconds}"
            )


@dataclass(frozen=True)
class ClientConfig:
    """
    Client configuration

    Base URL priority: explicit base_url override, then the network's URL.
    The chain id always comes from the selected network.

    Environment variables:
        ONEMONEY_NETWORK: mainnet, testnet or local (default: mainnet)
        ONEMONEY_BASE_URL: Custom deployment URL (overrides the network URL)
        ONEMONEY_TIMEOUT_SECONDS: Per-request timeout (default: 30)
        ONEMONEY_POLL_MAX_ATTEMPTS: Confirmation poll attempts (default: 30)
        ONEMONEY_POLL_INTERVAL_SECONDS: Seconds between polls (default: 1.0)

    Usage:
        config = ClientConfig(network="testnet")
        config.base_url      # https://api.testnet.1money.network
        config.chain_id      # 1212101
    """
    network: str = field(default_factory=lambda: _get_env("ONEMONEY_NETWORK", DEFAULT_NETWORK))
    base_url_override: Optional[str] = field(default_factory=lambda: _get_env("ONEMONEY_BASE_URL", None))
    timeout_seconds: float = field(default_factory=lambda: _get_env_float(
        "ONEMONEY_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
    ))
    poll: PollConfig = field(default_factory=PollConfig)
    user_agent: str = USER_AGENT

    def __post_init__(self):
        network = resolve_network(self.network)
        object.__setattr__(self, "network", network.name)

        if self.timeout_seconds <= 0:
            raise ConfigurationError.invalid(
                "timeout_seconds", f"must be positive, got {self.timeout_seconds}"
            )

        if self.base_url_override is not None:
            parsed = urlparse(self.base_url_override)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ConfigurationError.invalid(
                    "base_url", f"expected http(s) URL, got '{self.base_url_override}'"
                )

    @property
    def network_config(self) -> NetworkConfig:
        return NETWORKS[self.network]

    @property
    def base_url(self) -> str:
        url = self.base_url_override or self.network_config.base_url
        return url.rstrip("/")

    @property
    def chain_id(self) -> int:
        return self.network_config.chain_id

    def url_for(self, path: str) -> str:
        """Absolute URL of a versioned endpoint path"""
        return self.base_url + api_path(path)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ClientConfig":
        """
        Reload .env and build a config from the environment

        Variables already set in the process environment win over the file.

        Raises:
            ConfigurationError: env_file was given but does not exist
        """
        if env_file is not None and not Path(env_file).is_file():
            raise ConfigurationError.invalid("env_file", f"{env_file} not found")
        _load_env_file(Path(env_file) if env_file is not None else None)
        return cls()


@dataclass
class LoggingConfig:
    """
    Logging configuration with file output and correlation ID support.

    No log file is written unless LOG_FILE is set.

    Environment variables:
        LOG_FILE: Path to log file
        LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
        LOG_FORMAT: Custom log format string
        LOG_CONSOLE: Enable console output (default: true)
        LOG_MAX_BYTES: Max log file size before rotation (default: 10MB)
        LOG_BACKUP_COUNT: Number of backup files to keep (default: 5)

    Example .env:
        LOG_LEVEL=DEBUG
        LOG_FILE=logs/onemoney.log
    """
    log_file: str = field(default_factory=lambda: _get_env("LOG_FILE", ""))

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))

    # Available placeholders: %(asctime)s, %(name)s, %(levelname)s, %(message)s
    log_format: str = field(default_factory=lambda: _get_env(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    ))

    console_output: bool = field(default_factory=lambda: _get_env_bool("LOG_CONSOLE", True))

    max_bytes: int = field(default_factory=lambda: _get_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024))  # 10MB
    backup_count: int = field(default_factory=lambda: _get_env_int("LOG_BACKUP_COUNT", 5))

    @property
    def level(self) -> int:
        """Get numeric log level"""
        return getattr(logging, self.log_level.upper(), logging.INFO)


def _build_handlers(log_config: LoggingConfig) -> List[logging.Handler]:
    """File handler (rotating) when LOG_FILE is set, plus stderr when enabled"""
    handlers: List[logging.Handler] = []

    if log_config.log_file:
        from logging.handlers import RotatingFileHandler

        Path(log_config.log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_config.log_file,
            maxBytes=log_config.max_bytes,
            backupCount=log_config.backup_count,
            encoding='utf-8',
        ))

    if log_config.console_output:
        handlers.append(logging.StreamHandler())

    formatter = logging.Formatter(log_config.log_format)
    for handler in handlers:
        handler.setLevel(log_config.level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(
    log_config: Optional[LoggingConfig] = None,
    logger_name: str = "onemoney_client",
) -> logging.Logger:
    """
    Configure the client's logger tree.

    Calling it again replaces the previous handlers, so it is safe to
    re-run after changing LOG_* variables.

    Args:
        log_config: Logging configuration (read from environment if None)
        logger_name: Root of the logger tree to configure (default: onemoney_client)

    Returns:
        The configured logger

    Example:
        from onemoney_client.config import LoggingConfig, setup_logging
        logger = setup_logging(LoggingConfig(log_level="DEBUG", console_output=True))
    """
    log_config = log_config or LoggingConfig()

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_config.level)

    # Close before removing so file handles are released
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    for handler in _build_handlers(log_config):
        logger.addHandler(handler)

    # infra and modules loggers propagate to this one
    for child in ("infra", "modules"):
        logging.getLogger(f"{logger_name}.{child}").setLevel(log_config.level)

    if log_config.log_file:
        logger.info(f"Client logging to {log_config.log_file} at {log_config.log_level}")

    return logger
