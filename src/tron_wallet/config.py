"""Configuration system for the TRON wallet.

Settings come from three layers, later ones winning: built-in defaults, an
optional ``tron-wallet.yaml`` file (with ``${VAR}`` expansion), and
environment variables, which may themselves be supplied through a ``.env``
file in the working directory.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Mapping, Optional

import pydantic
import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from tron_wallet.errors import ConfigurationError
from tron_wallet.wallet.networks import (
    DEFAULT_USDT_CONTRACTS,
    Network,
    NetworkConfig,
    build_networks,
)

CONFIG_PATH_ENV = "TRON_WALLET_CONFIG"
DEFAULT_CONFIG_FILE = "tron-wallet.yaml"

# Environment variable -> Settings field
_ENV_OVERRIDES = {
    "TRON_WALLET_DIR": "wallet_dir",
    "TRON_WALLET_LOG_LEVEL": "log_level",
    "TRON_WALLET_LOG_FILE": "log_file",
    "TRONGRID_API_KEY": "trongrid_api_key",
}


# ---------------------------------------------------------------------------
# Environment-variable expansion helper
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _expand_env_vars(value: str, environ: Mapping[str, str]) -> str:
    """Replace ``${VAR_NAME}`` placeholders with their environment values.

    Unset variables expand to an empty string.
    """

    def _replace(match: re.Match) -> str:
        return environ.get(match.group(1), "")

    return _ENV_VAR_RE.sub(_replace, value)


def _expand_env_recursive(obj: object, environ: Mapping[str, str]) -> object:
    """Walk an arbitrary nested structure and expand env vars in strings."""
    if isinstance(obj, str):
        return _expand_env_vars(obj, environ)
    if isinstance(obj, dict):
        return {k: _expand_env_recursive(v, environ) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_recursive(item, environ) for item in obj]
    return obj


# ---------------------------------------------------------------------------
# Pydantic v2 models
# ---------------------------------------------------------------------------


def _default_contracts() -> dict[Network, str]:
    return dict(DEFAULT_USDT_CONTRACTS)


class Settings(BaseModel):
    """Root configuration object for the wallet CLI."""

    wallet_dir: Path = Path("./wallets")
    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    trongrid_api_key: str = ""
    usdt_fee_limit: int = Field(default=30, gt=0)  # in TRX
    usdt_contracts: dict[Network, str] = Field(default_factory=_default_contracts)

    @pydantic.field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @pydantic.field_validator("log_file", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        return None if value == "" else value

    @pydantic.field_validator("wallet_dir", "log_file")
    @classmethod
    def _expand_user(cls, value: Optional[Path]) -> Optional[Path]:
        return value.expanduser() if value is not None else None

    def networks(self) -> Mapping[Network, NetworkConfig]:
        """Build the immutable network table from these settings."""
        return build_networks(self.usdt_contracts)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def find_config_file(environ: Mapping[str, str] | None = None) -> Path | None:
    """Return the YAML config path if one exists.

    ``$TRON_WALLET_CONFIG`` takes precedence over ``./tron-wallet.yaml``. An
    explicitly configured path that does not exist is an error.
    """
    environ = os.environ if environ is None else environ
    explicit = environ.get(CONFIG_PATH_ENV)
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigurationError(
                f"Config file {path} not found (set by {CONFIG_PATH_ENV})",
                env_var=CONFIG_PATH_ENV,
            )
        return path
    default = Path.cwd() / DEFAULT_CONFIG_FILE
    return default if default.is_file() else None


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
    *,
    use_dotenv: bool = True,
) -> Settings:
    """Load and validate settings.

    Parameters
    ----------
    path:
        YAML file to read. Defaults to :func:`find_config_file`.
    environ:
        Environment mapping used for overrides and ``${VAR}`` expansion.
        Defaults to ``os.environ``.
    use_dotenv:
        Load ``.env`` from the working directory into ``os.environ`` first.
        Variables already set are not overridden.

    Raises
    ------
    ConfigurationError
        If the YAML is malformed or a value fails validation.
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    environ = os.environ if environ is None else environ

    if path is None:
        path = find_config_file(environ)

    raw_data: dict = {}
    if path is not None:
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        raw_data = _expand_env_recursive(loaded, environ)

    for var, field_name in _ENV_OVERRIDES.items():
        if environ.get(var):
            raw_data[field_name] = environ[var]

    configured = raw_data.get("usdt_contracts") or {}
    if not isinstance(configured, dict):
        raise ConfigurationError("usdt_contracts must map network names to addresses")
    # Blank entries (e.g. an unset ${VAR}) keep the default contract
    contracts = {
        str(name): value
        for name, value in configured.items()
        if value and str(value).strip()
    }
    for network in Network:
        value = environ.get(network.contract_env_var)
        if value:
            contracts[network.value] = value
    raw_data["usdt_contracts"] = {**_defaults_by_name(), **contracts}

    try:
        return Settings.model_validate(raw_data)
    except pydantic.ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


def _defaults_by_name() -> dict[str, str]:
    return {network.value: address for network, address in DEFAULT_USDT_CONTRACTS.items()}
