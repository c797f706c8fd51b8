"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    DEFAULT_FANTOM_RPC_URL,
    FANTOM_FARM_ADDRESSES,
    POLL_INTERVAL_SECONDS,
)
from .logger import resolve_level

load_dotenv()

SECRET_FIELDS = {"private_key"}
DEFAULT_SESSION_PATH = Path.home() / ".config" / "seed-farm" / "session.json"


class FarmSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with SEED_FARM_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- endpoints / contracts ---
    rpc_url: str = DEFAULT_FANTOM_RPC_URL
    token_address: str = FANTOM_FARM_ADDRESSES["token"]
    farm_address: str = FANTOM_FARM_ADDRESSES["farm"]
    pair_address: str = FANTOM_FARM_ADDRESSES["pair"]

    # --- signing ---
    # Without a key the node's own accounts are used (eth_requestAccounts)
    private_key: SecretStr | None = None

    # --- sync ---
    poll_interval: float = Field(
        default=POLL_INTERVAL_SECONDS,
        gt=0,
        description="Seconds between two poll ticks.",
    )
    apr_uses_previous_price: bool = Field(
        default=True,
        description="Derive APR from the price read on the previous tick, as the dapp does.",
    )

    # --- session ---
    session_path: Path = DEFAULT_SESSION_PATH

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SEED_FARM_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("private_key", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        resolve_level(v)
        return v.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("SEED_FARM_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("seed-farm.toml")
                    user_config = Path.home() / ".config" / "seed-farm" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [seed_farm]
                body = data.get("seed_farm", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump(mode="json")
        if self.private_key:
            data["private_key"] = "***redacted***"
        return data

    @property
    def uses_local_key(self) -> bool:
        """Whether transactions are signed locally instead of by the node."""
        return self.private_key is not None
