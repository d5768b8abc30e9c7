"""Subcommand modules for mktledger.

Provides register_commands() which uses deferred imports to keep
``mktledger --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register command groups and standalone commands on the root CLI group.

    2 groups (admin, query) + 4 standalone marketplace commands.
    """
    from mktledger.commands.admin import admin
    from mktledger.commands.query import query

    cli.add_command(admin)
    cli.add_command(query)

    from mktledger.commands.market import acquire, list_cmd, reimburse, remove

    cli.add_command(list_cmd)
    cli.add_command(remove)
    cli.add_command(acquire)
    cli.add_command(reimburse)
