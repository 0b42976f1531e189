"""Subcommand modules for graphtoll.

Provides register_commands() which uses deferred imports to keep
``graphtoll --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``graph``, ``weights`` and ``tokens`` groups on the root CLI group."""
    from graphtoll.commands.graph import graph
    from graphtoll.commands.tokens import tokens
    from graphtoll.commands.weights import weights

    cli.add_command(graph)
    cli.add_command(weights)
    cli.add_command(tokens)
