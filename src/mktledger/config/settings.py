"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MKTLEDGER_*`` prefix
  3. TOML file    — ``mktledger.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`mktledger.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from mktledger.config.discovery import find_config
from mktledger.config.models import LedgerConfig, MarketConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``mktledger.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class LedgerSettings(BaseSettings):
    """Unified settings for the mktledger CLI and services.

    Attributes:
        ledger_root: Directory holding the ledger database (parent of
            ``mktledger.toml``, or CWD if no config found).
        config_path: Explicit ``--config`` override, or None for discovery.
        caller: Identity that submits operations (``--as``).
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MKTLEDGER_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML, derived from config location) ---
    ledger_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    caller: str | None = None
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    market: MarketConfig = Field(default_factory=MarketConfig)

    @property
    def db_path(self) -> Path:
        """Location of the SQLite ledger database."""
        return self.ledger_root / self.ledger.db_dir / "ledger.db"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        ledger_root: Path | None = None,
        **cli_flags: Any,
    ) -> LedgerSettings:
        """Construct settings from CLI invocation.

        Discovers ``mktledger.toml`` via walk-up (or explicit *config_path*),
        resolves *ledger_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides. Flags passed
        as None are dropped so env vars and TOML can still supply them.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(ledger_root)

        resolved_root = ledger_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        flags = {k: v for k, v in cli_flags.items() if v is not None}

        _tls.toml_path = toml_path
        try:
            return cls(
                ledger_root=resolved_root,
                config_path=toml_path,
                **flags,
            )
        finally:
            _tls.toml_path = None
