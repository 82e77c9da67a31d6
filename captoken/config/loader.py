"""
CapToken TOML Configuration Loader

Loads token parameters from a TOML file with environment variable overrides.
Each section is a dataclass with ``from_dict`` and ``apply_env``.

Example ``captoken.toml``::

    [token]
    name = "MyToken"
    symbol = "MTK"
    owner = "0x1111111111111111111111111111111111111111"
    initial_supply = "1000000"      # strings are human amounts (× 10**decimals)
    max_supply = "1000000000"
    minting_fee = "0.001"           # native units, 18 decimals
    mint_cooldown = 86400           # ints are raw base units / seconds

    [logging]
    level = "DEBUG"

Environment variable mapping:
    [token] minting_fee  → CAPTOKEN_MINTING_FEE
    [token] owner        → CAPTOKEN_OWNER
    [logging] level      → CAPTOKEN_LOG_LEVEL
    ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib
except ImportError:  # Python < 3.11
    import tomli as tomllib

from ..constants import (
    DEFAULT_DECIMALS,
    DEFAULT_MINTING_FEE,
    MAX_DECIMALS,
    MAX_SUPPLY,
    MINT_COOLDOWN,
    ZERO_ADDRESS,
)
from ..exceptions import ConfigurationError
from ..logger import configure_logging, get_logger
from ..tokens.errors import InvalidAmountError
from ..tokens.ledger import require_uint256
from ..tokens.units import parse_units

logger = get_logger(__name__)

NATIVE_DECIMALS = 18


def _to_base_units(value: Any, decimals: int, key: str) -> int:
    """ints are taken as base units, strings as human-readable decimal amounts."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{key}: expected an amount, got {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ConfigurationError(f"{key}: must not be negative")
        return value
    if isinstance(value, str):
        try:
            return parse_units(value.strip(), decimals)
        except InvalidAmountError as e:
            raise ConfigurationError(f"{key}: {e}") from e
    raise ConfigurationError(f"{key}: expected int or string, got {type(value).__name__}")


def _to_int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key}: expected an integer, got {value!r}") from e


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass
class TokenConfig:
    """[token] section. All amounts are stored in base units."""
    name: str = "CapToken"
    symbol: str = "CAP"
    owner: str = ZERO_ADDRESS
    decimals: int = DEFAULT_DECIMALS
    initial_supply: int = 0
    max_supply: int = MAX_SUPPLY
    minting_fee: int = DEFAULT_MINTING_FEE
    mint_cooldown: int = MINT_COOLDOWN

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenConfig":
        decimals = _to_int(data.get("decimals", DEFAULT_DECIMALS), "token.decimals")
        return cls(
            name=data.get("name", "CapToken"),
            symbol=data.get("symbol", "CAP"),
            owner=data.get("owner", ZERO_ADDRESS),
            decimals=decimals,
            initial_supply=_to_base_units(
                data.get("initial_supply", 0), decimals, "token.initial_supply"
            ),
            max_supply=_to_base_units(
                data.get("max_supply", MAX_SUPPLY), decimals, "token.max_supply"
            ),
            minting_fee=_to_base_units(
                data.get("minting_fee", DEFAULT_MINTING_FEE), NATIVE_DECIMALS, "token.minting_fee"
            ),
            mint_cooldown=_to_int(data.get("mint_cooldown", MINT_COOLDOWN), "token.mint_cooldown"),
        )

    def apply_env(self) -> None:
        """Override from environment variables."""
        if v := os.environ.get("CAPTOKEN_NAME"):
            self.name = v
        if v := os.environ.get("CAPTOKEN_SYMBOL"):
            self.symbol = v
        if v := os.environ.get("CAPTOKEN_OWNER"):
            self.owner = v
        if v := os.environ.get("CAPTOKEN_INITIAL_SUPPLY"):
            self.initial_supply = _to_base_units(v, self.decimals, "CAPTOKEN_INITIAL_SUPPLY")
        if v := os.environ.get("CAPTOKEN_MINTING_FEE"):
            self.minting_fee = _to_base_units(v, NATIVE_DECIMALS, "CAPTOKEN_MINTING_FEE")
        if v := os.environ.get("CAPTOKEN_MINT_COOLDOWN"):
            self.mint_cooldown = _to_int(v, "CAPTOKEN_MINT_COOLDOWN")

    def validate(self) -> None:
        for key in ("initial_supply", "max_supply", "minting_fee", "mint_cooldown"):
            try:
                require_uint256(getattr(self, key), f"token.{key}")
            except InvalidAmountError as e:
                raise ConfigurationError(str(e)) from e
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise ConfigurationError(f"token.decimals must be 0-{MAX_DECIMALS}")
        if self.initial_supply > self.max_supply:
            raise ConfigurationError("token.initial_supply exceeds token.max_supply")
        if self.mint_cooldown < 0:
            raise ConfigurationError("token.mint_cooldown must not be negative")
        if not self.owner or self.owner == ZERO_ADDRESS:
            raise ConfigurationError("token.owner must be set to a non-null address")


@dataclass
class LoggingConfig:
    """[logging] section."""
    level: str = "INFO"
    console_highlighting: bool = True
    file_output: bool = False
    log_file: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LoggingConfig":
        return cls(
            level=data.get("level", "INFO"),
            console_highlighting=data.get("console_highlighting", True),
            file_output=data.get("file_output", False),
            log_file=data.get("log_file", ""),
        )

    def apply_env(self) -> None:
        if v := os.environ.get("CAPTOKEN_LOG_LEVEL"):
            self.level = v
        if v := os.environ.get("CAPTOKEN_LOG_FILE"):
            self.log_file = v
            self.file_output = True

    def apply(self) -> None:
        """Reconfigure the process-wide logging from this section."""
        configure_logging(
            log_level=self.level,
            log_file=Path(self.log_file) if self.log_file else None,
            file_output=self.file_output,
            highlighting=self.console_highlighting,
        )


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass
class CapTokenConfig:
    token: TokenConfig = field(default_factory=TokenConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CapTokenConfig":
        return cls(
            token=TokenConfig.from_dict(data.get("token", {})),
            logging=LoggingConfig.from_dict(data.get("logging", {})),
        )

    @classmethod
    def from_file(cls, config_path: str) -> "CapTokenConfig":
        """
        Load configuration from a TOML file.

        A missing file yields defaults (still subject to env overrides).
        """
        path = Path(config_path)
        if not path.exists():
            logger.warning(f"Config file not found: {config_path}, using defaults")
            cfg = cls()
            cfg.apply_env()
            return cfg

        try:
            with open(path, "rb") as f:
                raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

        cfg = cls.from_dict(raw)
        cfg.apply_env()
        logger.info(f"Loaded config from {config_path} (token {cfg.token.symbol})")
        return cfg

    def apply_env(self) -> None:
        """Apply environment variable overrides to all sections."""
        self.token.apply_env()
        self.logging.apply_env()


def load_config(path: Optional[str] = None) -> CapTokenConfig:
    """
    Load token configuration.

    Resolution order:
        1. Explicit *path* argument
        2. CAPTOKEN_CONFIG env var
        3. ./captoken.toml in current directory
        4. Defaults (with env overrides)
    """
    if path is None:
        path = os.environ.get("CAPTOKEN_CONFIG", "captoken.toml")

    return CapTokenConfig.from_file(path)
