"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy Store initialization, the caller
identity, and centralized result emission (stdout/stderr routing + exit
codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mktledger.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mktledger.config.settings import LedgerSettings
    from mktledger.infrastructure.store import Store
    from mktledger.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``. The store is lazily
    initialized on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: LedgerSettings) -> None:
        self.settings = settings
        self._store: Store | None = None

        from mktledger.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from mktledger.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> Store:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from mktledger.infrastructure.store import Store

            self._store = Store(self.settings)
        return self._store

    @property
    def caller(self) -> str:
        """Identity submitting the operation (``--as`` / ``MKTLEDGER_CALLER``)."""
        if not self.settings.caller:
            msg = "No caller identity. Pass --as USER or set MKTLEDGER_CALLER."
            raise click.UsageError(msg)
        return self.settings.caller

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def close(self) -> None:
        """Release the database engine if the store was opened."""
        if self._store is not None:
            self._store.close()
            self._store = None
