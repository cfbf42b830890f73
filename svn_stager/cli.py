"""Command line entry point: `svn-stager download ...`."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import config as stager_config
from .process.logging import FileLogSink
from .scm import Credentials, RetrievalError, RetrievalRequest, SvnClone, parse_source_url


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Stage Subversion checkouts for a build pipeline."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source")
@click.option("--working-dir", "-w", required=True, type=click.Path(file_okay=False), help="Staging root")
@click.option("--revision", "-r", default="", help="Revision to check out (default: HEAD)")
@click.option("--context-dir", default="", help="Only stage this subdirectory of the checkout")
@click.option("--username", default="", help="svn username")
@click.option("--password", default="", help="svn password")
@click.option("--ignore-submodules", is_flag=True, help="Do not fetch externals")
@click.option("--hybrid-paths/--no-hybrid-paths", default=None, help="Translate paths with cygpath")
@click.option("--collect-info/--no-collect-info", default=None, help="Record commit metadata")
@click.option("--log-file", default=None, help="Also write svn output to this file")
def download(
    source: str,
    working_dir: str,
    revision: str,
    context_dir: str,
    username: str,
    password: str,
    ignore_submodules: bool,
    hybrid_paths: Optional[bool],
    collect_info: Optional[bool],
    log_file: Optional[str],
) -> None:
    """Check out SOURCE into WORKING_DIR/source."""
    try:
        source_url = parse_source_url(source)
    except ValueError as exc:
        click.echo(f"Invalid source: {exc}", err=True)
        sys.exit(2)

    log_file = log_file if log_file is not None else stager_config.stager_log_file()
    sink = FileLogSink(logging.getLogger("svn_stager.svn.output"), Path(log_file)) if log_file else None

    request = RetrievalRequest(
        working_dir=Path(working_dir),
        source=source_url,
        revision=revision,
        context_dir=context_dir,
        credentials=Credentials(username, password) if username or password else None,
        ignore_submodules=ignore_submodules,
    )
    downloader = SvnClone(hybrid_paths=hybrid_paths, collect_info=collect_info, output_sink=sink)

    try:
        info = downloader.download(request)
    except RetrievalError as exc:
        click.echo(f"Download failed ({exc.kind.value}): {exc}", err=True)
        sys.exit(1)
    finally:
        if sink is not None:
            sink.close()

    click.echo(f"Location: {info.location}")
    click.echo(f"Ref: {info.ref}")
    if info.context_dir:
        click.echo(f"Context dir: {info.context_dir}")
    if info.commit_id:
        click.echo(f"Commit: {info.commit_id}")


if __name__ == "__main__":  # pragma: no cover
    main()
