"""Custom Click base classes and parameter types.

LedgerCommand and LedgerGroup accept an ``examples`` parameter; passing
``--examples`` prints them and exits, which keeps ``--help`` short.

:data:`AMOUNT` parses whole-number quantities and prices. Sign and range
checks are left to the services so the CLI reports the same error codes
as any other caller.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    """Attach an eager ``--examples`` flag when examples are provided."""

    params: list[click.Parameter]

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if not examples:
            return

        def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
            if not value:
                return
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(examples)
            ctx.exit(0)

        self.params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=show_examples,
                help="Show usage examples.",
            )
        )


class LedgerCommand(_ExamplesMixin, click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class LedgerGroup(_ExamplesMixin, click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = LedgerCommand`` so subcommands accept the
    ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = LedgerCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class AmountType(click.ParamType):
    """Whole number, with optional ``_`` digit separators (``1_000``)."""

    name = "amount"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> int:
        if isinstance(value, int):
            return value
        try:
            return int(str(value).replace("_", ""), 10)
        except ValueError:
            self.fail(f"{value!r} is not a whole number", param, ctx)


AMOUNT = AmountType()
