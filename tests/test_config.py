"""
Configuration & Logging Test Suite

Coverage:
  - TOML loading, human-readable amounts, env overrides
  - validation and GuardedToken.from_config
  - constants wrappers and log formatter sanitising
"""

import logging
import os
import sys

import pytest

# ── Path setup ────────────────────────────────────────────────────────
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from captoken.config import CapTokenConfig, LoggingConfig, TokenConfig, load_config
from captoken.constants import (
    DEFAULT_MINTING_FEE,
    MAX_SUPPLY,
    MINT_COOLDOWN,
    ONE_TOKEN,
    UINT256_MAX,
    ConfigBool,
    ConfigString,
    parse_bool,
)
from captoken.exceptions import ConfigurationError
from captoken.logger import LogManager, TerminalSafeFormatter
from captoken.tokens import GuardedToken


OWNER = "0x" + "0a" * 20

ENV_KEYS = [
    "CAPTOKEN_CONFIG",
    "CAPTOKEN_NAME",
    "CAPTOKEN_SYMBOL",
    "CAPTOKEN_OWNER",
    "CAPTOKEN_INITIAL_SUPPLY",
    "CAPTOKEN_MINTING_FEE",
    "CAPTOKEN_MINT_COOLDOWN",
    "CAPTOKEN_LOG_LEVEL",
    "CAPTOKEN_LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def write_config(tmp_path, body: str):
    path = tmp_path / "captoken.toml"
    path.write_text(body)
    return path


SAMPLE = f"""
[token]
name = "MyToken"
symbol = "MTK"
owner = "{OWNER}"
initial_supply = "1000000"
max_supply = "1000000000"
minting_fee = "0.001"
mint_cooldown = 3600

[logging]
level = "DEBUG"
"""


# ══════════════════════════════════════════════════════════════════════
#  TOML LOADING
# ══════════════════════════════════════════════════════════════════════


class TestLoadConfig:

    def test_load_sample(self, tmp_path):
        cfg = load_config(str(write_config(tmp_path, SAMPLE)))
        assert cfg.token.name == "MyToken"
        assert cfg.token.symbol == "MTK"
        assert cfg.token.owner == OWNER
        assert cfg.token.initial_supply == 1_000_000 * ONE_TOKEN
        assert cfg.token.max_supply == MAX_SUPPLY
        assert cfg.token.minting_fee == DEFAULT_MINTING_FEE
        assert cfg.token.mint_cooldown == 3600
        assert cfg.logging.level == "DEBUG"

    def test_int_amounts_are_base_units(self, tmp_path):
        path = write_config(tmp_path, "[token]\ninitial_supply = 5\nminting_fee = 7\n")
        cfg = load_config(str(path))
        assert cfg.token.initial_supply == 5
        assert cfg.token.minting_fee == 7

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = load_config(str(tmp_path / "nope.toml"))
        assert cfg.token.symbol == "CAP"
        assert cfg.token.max_supply == MAX_SUPPLY
        assert cfg.token.mint_cooldown == MINT_COOLDOWN

    def test_path_from_env(self, tmp_path, monkeypatch):
        path = write_config(tmp_path, SAMPLE)
        monkeypatch.setenv("CAPTOKEN_CONFIG", str(path))
        assert load_config().token.symbol == "MTK"

    def test_invalid_toml(self, tmp_path):
        path = write_config(tmp_path, "[token\nname = ")
        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(str(path))

    def test_bad_amount(self, tmp_path):
        path = write_config(tmp_path, '[token]\nminting_fee = "lots"\n')
        with pytest.raises(ConfigurationError, match="minting_fee"):
            load_config(str(path))

    def test_negative_amount(self):
        with pytest.raises(ConfigurationError):
            TokenConfig.from_dict({"initial_supply": -1})


class TestEnvOverrides:

    def test_token_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CAPTOKEN_SYMBOL", "ENV")
        monkeypatch.setenv("CAPTOKEN_MINTING_FEE", "0.5")
        monkeypatch.setenv("CAPTOKEN_MINT_COOLDOWN", "60")
        cfg = load_config(str(write_config(tmp_path, SAMPLE)))
        assert cfg.token.symbol == "ENV"
        assert cfg.token.minting_fee == 5 * 10**17
        assert cfg.token.mint_cooldown == 60

    def test_overrides_apply_without_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CAPTOKEN_OWNER", OWNER)
        cfg = load_config(str(tmp_path / "missing.toml"))
        assert cfg.token.owner == OWNER

    def test_logging_overrides(self, monkeypatch):
        monkeypatch.setenv("CAPTOKEN_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("CAPTOKEN_LOG_FILE", "/tmp/cap.log")
        section = LoggingConfig()
        section.apply_env()
        assert section.level == "WARNING"
        assert section.log_file == "/tmp/cap.log"
        assert section.file_output is True


# ══════════════════════════════════════════════════════════════════════
#  VALIDATION & TOKEN CONSTRUCTION
# ══════════════════════════════════════════════════════════════════════


class TestValidation:

    def test_owner_required(self):
        with pytest.raises(ConfigurationError, match="owner"):
            TokenConfig().validate()

    def test_initial_over_max(self):
        cfg = TokenConfig(owner=OWNER, initial_supply=10, max_supply=5)
        with pytest.raises(ConfigurationError, match="exceeds"):
            cfg.validate()

    def test_bad_decimals(self):
        with pytest.raises(ConfigurationError, match="decimals"):
            TokenConfig(owner=OWNER, decimals=30).validate()

    @pytest.mark.parametrize("key", ["initial_supply", "max_supply", "minting_fee"])
    def test_amounts_bounded_to_uint256(self, key):
        cfg = TokenConfig(owner=OWNER)
        setattr(cfg, key, UINT256_MAX + 1)
        with pytest.raises(ConfigurationError, match=key):
            cfg.validate()

    def test_oversized_toml_amount(self, tmp_path):
        path = write_config(
            tmp_path, f'[token]\nowner = "{OWNER}"\nmax_supply = "{UINT256_MAX}"\n'
        )
        with pytest.raises(ConfigurationError, match="max_supply"):
            GuardedToken.from_config(load_config(str(path)).token)

    def test_from_config(self, tmp_path):
        cfg = load_config(str(write_config(tmp_path, SAMPLE)))
        token = GuardedToken.from_config(cfg.token, clock=lambda: 42)
        assert token.symbol == "MTK"
        assert token.balance_of(OWNER) == 1_000_000 * ONE_TOKEN
        assert token.mint_cooldown == 3600
        assert token.events[0].timestamp == 42

    def test_from_config_rejects_invalid(self):
        with pytest.raises(ConfigurationError):
            GuardedToken.from_config(TokenConfig())

    def test_from_dict_defaults(self):
        cfg = CapTokenConfig.from_dict({})
        assert cfg.token.decimals == 18
        assert cfg.logging.level == "INFO"


# ══════════════════════════════════════════════════════════════════════
#  CONSTANTS & LOGGING
# ══════════════════════════════════════════════════════════════════════


class TestConstantsWrappers:

    def test_parse_bool(self):
        assert parse_bool(" true ") is True
        assert parse_bool("FALSE") is False
        assert parse_bool("INFO") == "INFO"

    def test_config_values_keep_default(self):
        s = ConfigString("DEBUG", "INFO")
        assert s == "DEBUG"
        assert s.default() == "INFO"
        b = ConfigBool(False, True)
        assert not b
        assert b.default() is True
        assert str(b) == "False"


class TestLogging:

    def test_sanitize_strips_escape_sequences(self):
        raw = "Minted \x1b[31m100\x1b[0m to 0xabc\r\x07"
        assert TerminalSafeFormatter.sanitize(raw) == "Minted 100 to 0xabc"

    def test_invalid_log_format_falls_back(self):
        assert LogManager.validate_log_format("%(nope") != "%(nope"

    def test_invalid_date_format_falls_back(self):
        assert LogManager.validate_date_format("not a date") != "not a date"

    def test_log_manager_is_singleton(self):
        assert LogManager() is LogManager()
        assert LogManager().is_configured

    def test_logging_section_applies(self, tmp_path):
        log_file = tmp_path / "cap.log"
        section = LoggingConfig(
            level="WARNING",
            console_highlighting=False,
            file_output=True,
            log_file=str(log_file),
        )
        try:
            section.apply()
            package_logger = logging.getLogger("captoken")
            assert package_logger.level == logging.WARNING
            logging.getLogger("captoken.test").warning("Token CAP PAUSED")
            for handler in package_logger.handlers:
                handler.flush()
            assert "Token CAP PAUSED" in log_file.read_text()
        finally:
            LoggingConfig().apply()

    def test_configure_leaves_root_logger_alone(self):
        root = logging.getLogger()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        root_level = root.level
        try:
            LoggingConfig(level="DEBUG", console_highlighting=False).apply()
            assert sentinel in root.handlers
            assert root.level == root_level
            assert logging.getLogger("captoken").propagate is False
        finally:
            root.removeHandler(sentinel)
            LoggingConfig().apply()
