"""Tests for LedgerSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from mktledger.config.settings import LedgerSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MKTLEDGER_CONFIG", "MKTLEDGER_CALLER", "MKTLEDGER_MARKET__ADMIN"):
        monkeypatch.delenv(name, raising=False)


class TestLedgerSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.ledger_root == tmp_path
        assert settings.caller is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.ledger.name == "my-ledger"
        assert settings.market.admin == "platform"
        assert settings.market.unit_price == 50

    def test_db_path(self, tmp_path: Path) -> None:
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.db_path == tmp_path / ".mktledger" / "ledger.db"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "mktledger.toml").write_text(
            '[ledger]\nname = "bazaar"\n[market]\nadmin = "ops"\nfee_rate_percent = 5\n'
        )
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.ledger.name == "bazaar"
        assert settings.market.admin == "ops"
        assert settings.market.fee_rate_percent == 5
        assert settings.market.unit_price == 50

    def test_root_follows_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "mktledger.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = LedgerSettings.from_cli()
        assert settings.ledger_root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[ledger]\nname = "custom"\n')
        settings = LedgerSettings.from_cli(config_path=str(custom), ledger_root=tmp_path)
        assert settings.ledger.name == "custom"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "mktledger.toml").write_text("[market\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            LedgerSettings.from_cli(ledger_root=tmp_path)

    def test_out_of_range_rate_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "mktledger.toml").write_text("[market]\nfee_rate_percent = 150\n")
        with pytest.raises(Exception):
            LedgerSettings.from_cli(ledger_root=tmp_path)


class TestPriority:
    def test_cli_flag_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MKTLEDGER_CALLER", "from-env")
        settings = LedgerSettings.from_cli(ledger_root=tmp_path, caller="from-flag")
        assert settings.caller == "from-flag"

    def test_none_flag_falls_through_to_env(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("MKTLEDGER_CALLER", "from-env")
        settings = LedgerSettings.from_cli(ledger_root=tmp_path, caller=None)
        assert settings.caller == "from-env"

    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "mktledger.toml").write_text('[market]\nadmin = "toml-admin"\n')
        monkeypatch.setenv("MKTLEDGER_MARKET__ADMIN", "env-admin")
        settings = LedgerSettings.from_cli(ledger_root=tmp_path)
        assert settings.market.admin == "env-admin"
