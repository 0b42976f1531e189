"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to every subcommand via
``@click.pass_obj``. Provides lazy Store initialization, the acting
principal, and centralized result emission (stdout/stderr routing and
exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from graphtoll.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from graphtoll.config.settings import GraphtollSettings
    from graphtoll.infrastructure.store import Store
    from graphtoll.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The store is opened on first use so ``--help`` and ``--version`` never
    touch the database.
    """

    def __init__(self, settings: GraphtollSettings) -> None:
        self.settings = settings
        self._store: Store | None = None

        from graphtoll.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            principal=settings.principal,
        )

        if settings.verbose:
            from graphtoll.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def store(self) -> Store:
        """The store instance (created lazily on first access)."""
        if self._store is None:
            from graphtoll.infrastructure.store import Store

            self._store = Store(self.settings)
        return self._store

    def require_principal(self) -> str:
        """Identity for paid or attributed operations.

        Raises:
            click.UsageError: If neither ``--principal`` nor
                ``GRAPHTOLL_PRINCIPAL`` supplied one.
        """
        if not self.settings.principal:
            msg = "This command needs an identity: pass --principal or set GRAPHTOLL_PRINCIPAL."
            raise click.UsageError(msg)
        return self.settings.principal

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
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
        """Dispose the store if one was opened."""
        if self._store is not None:
            self._store.close()
            self._store = None
