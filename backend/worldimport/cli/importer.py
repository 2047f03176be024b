"""CLI commands importing an exported batch and seeding popularity relations."""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import click

from worldimport.core.errors import ImporterError, UsageError
from worldimport.core.logger import ensure_run_id
from worldimport.core.store import ensure_snapshot, prepare_output_store, sqlite_uri, store_scope
from worldimport.factory import create_app
from worldimport.services._shared.base import ServiceContext
from worldimport.services.importer import ImportResult, ImportService
from worldimport.services.seeding import PopularityLoader, SeedResult, SeedService
from worldimport.services.seeding.service import SEED_MODES

LOGGER = logging.getLogger(__name__)

USAGE = "Usage: world-import <template-path> <output-path> [seed]"
SEED_TOKEN = "seed"


@dataclass(slots=True)
class JobResult:
    """What one CLI run did: the import counts and, if requested, seeding."""

    output: Path
    created_store: bool
    imported: ImportResult
    seeded: SeedResult | None = None


def wants_seed(token: str | None) -> bool:
    """``True`` when the optional third argument is ``seed`` (any case)."""
    if token is None:
        return False
    if token.strip().lower() == SEED_TOKEN:
        return True
    LOGGER.warning("Ignoring unrecognized third argument %r", token)
    return False


def run_import_job(
    template: str | Path,
    output: str | Path,
    *,
    seed: bool = False,
    config: object | None = None,
) -> JobResult:
    """
    Run the import (and optional seeding) against ``output``.

    :param template: Store file copied to ``output`` when it does not exist.
    :param output: Target store path.
    :param seed: Run the seeding phase after the import commits.
    :param config: Config object/class for :func:`create_app`.
    :raises ImporterError: On any terminal failure.
    """
    output = Path(output)
    app = create_app(config, overrides={"SQLALCHEMY_DATABASE_URI": sqlite_uri(output)})
    if app.config["SEED_MODE"] not in SEED_MODES:
        mode = app.config["SEED_MODE"]
        raise UsageError(f"Unknown SEED_MODE {mode!r}; expected one of {SEED_MODES}")

    snapshot = ensure_snapshot(app.config["SNAPSHOT_PATH"])
    created = prepare_output_store(template, output)

    ctx = ServiceContext(
        run_id=ensure_run_id(), placeholder_prefix=app.config["PLACEHOLDER_PREFIX"]
    )
    importer = ImportService(ctx=ctx)
    batch = importer.load_batch(app.config["IMPORT_PATH"])
    importer.ensure_importable(batch)

    with store_scope(app):
        imported = importer.import_batch(batch)
    result = JobResult(output=output, created_store=created, imported=imported)
    _echo_import(result)

    if seed:
        with store_scope(app), PopularityLoader(snapshot) as loader:
            result.seeded = SeedService(ctx=ctx, mode=app.config["SEED_MODE"]).seed(loader)
        _echo_seed(result.seeded)
    return result


def _echo_import(result: JobResult) -> None:
    imported = result.imported
    if result.created_store:
        click.echo(f"Created new store from template at {result.output}")
    click.echo(
        f"Imported {imported.users} users, {imported.levels} levels, "
        f"{imported.relations} relations, {imported.assets} assets -> {result.output}"
    )
    if imported.relations_skipped:
        click.echo(f"  skipped {imported.relations_skipped} duplicate relations")


def _echo_seed(seeded: SeedResult) -> None:
    click.echo("Seed summary:")
    if seeded.purged:
        click.echo(f"  purged placeholders  {seeded.purged}")
    click.echo(
        f"  placeholder users    created={seeded.pool_size}  total={seeded.placeholders_total}"
    )
    width = max(len(p.name) for p in seeded.passes)
    for outcome in seeded.passes:
        click.echo(
            f"  {outcome.name.ljust(width)}  rows={outcome.rows}  targets={outcome.targets}"
            f"  clamped={outcome.clamped}"
        )


@click.command("import")
@click.argument("template", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("mode", required=False)
def import_command(template: Path, output: Path, mode: str | None) -> None:
    """Import import.json into OUTPUT, creating it from TEMPLATE if needed.

    Pass ``seed`` as a third argument to seed popularity relations from the
    snapshot afterwards.
    """
    try:
        run_import_job(template, output, seed=wants_seed(mode))
    except ImporterError as exc:
        LOGGER.error("%s", exc, extra={"phase": exc.code})
        click.echo(str(exc), err=True)
        raise click.exceptions.Exit(exc.exit_code) from exc


@click.group("world")
def world_cli() -> None:
    """World import and relational seeding commands."""


world_cli.add_command(import_command)


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point; returns the process exit code.

    Every token is positional, so ``--help`` counts towards the arity and a
    path starting with ``-`` is still a path.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        code = import_command.main(
            args=["--", *args],
            prog_name="world-import",
            standalone_mode=False,
        )
    except click.UsageError as exc:
        click.echo(f"{exc.format_message()}\n{USAGE}", err=True)
        return 1
    except click.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except Exception:
        LOGGER.exception("Unexpected failure")
        click.echo("Unexpected failure; see log for details.", err=True)
        return 1
    return int(code or 0)
