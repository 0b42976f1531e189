"""Click base classes that carry usage examples.

Commands and groups built from :class:`GtCommand` / :class:`GtGroup` take an
``examples=`` string. It stays out of ``--help``; a one-line epilog points
at ``--examples``, which prints the examples and exits.
"""

from __future__ import annotations

from typing import Any

import click

EXAMPLES_HINT = "Run with --examples for sample invocations."


def _examples_option(examples: str) -> click.Option:
    def show(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show,
        help="Show usage examples and exit.",
    )


def _with_examples(kwargs: dict[str, Any], examples: str | None) -> dict[str, Any]:
    if examples:
        kwargs.setdefault("epilog", EXAMPLES_HINT)
    return kwargs


class GtCommand(click.Command):
    """Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **_with_examples(kwargs, examples))
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class GtGroup(click.Group):
    """Group with an optional ``--examples`` flag.

    Subcommands default to :class:`GtCommand`, so ``@group.command(examples=...)``
    works without ``cls=``.
    """

    command_class = GtCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **_with_examples(kwargs, examples))
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))
