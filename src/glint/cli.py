"""CLI entry point for glint. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from glint.config import load_config
from glint.figlet import FontError
from glint.git import Git, GitError
from glint.prompt.files_prompt import Escaped, FilesPrompt, Submitted, Terminated
from glint.tui.terminal import ProcessTerminal

logger = logging.getLogger(__name__)

EXIT_TERMINATED = 130

_LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def _setup_logging(level: str, log_file: Path | None) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        filename=str(log_file) if log_file is not None else None,
    )


def _stdin_is_tty() -> bool:
    return sys.stdin.isatty()


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@click.option("-m", "--message", default=None, help="Commit message (passed to git commit -m)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of glint.json / ~/.glint/config.json",
)
@click.option(
    "--log-level",
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write log output to this file instead of stderr",
)
@click.argument("commit_args", nargs=-1, type=click.UNPROCESSED)
def main(message, config_path, log_level, log_file, commit_args):
    """Choose the files to commit from a checklist, then run git commit.

    Any extra arguments are passed through to git commit.
    """
    _setup_logging(log_level, log_file)

    try:
        git = Git.from_cwd()
        config = load_config(git.repo_root, config_path)
        font = config.load_font()
        git.pager = list(config.pager)
        status = git.status()
    except (GitError, FontError, OSError) as e:
        raise click.ClickException(str(e)) from e

    if not status:
        click.echo("Nothing to commit.")
        return

    if not _stdin_is_tty():
        raise click.ClickException("glint needs an interactive terminal")

    prompt = FilesPrompt(
        status.items,
        terminal=ProcessTerminal(),
        banner=font,
        diff_viewer=git.diff_less,
        max_rows=config.max_rows,
        keybindings=config.keybindings,
    )
    try:
        result = prompt.run()
    except EOFError as e:
        raise click.ClickException("input closed before a choice was made") from e

    if isinstance(result, Terminated):
        sys.exit(EXIT_TERMINATED)
    if isinstance(result, Escaped):
        return
    if not isinstance(result, Submitted):
        raise click.ClickException(f"unexpected prompt result: {result!r}")

    if not result.files and not status.any_staged():
        click.echo("No files selected.", err=True)
        sys.exit(1)

    try:
        if result.files:
            git.add(result.files)
        returncode = git.commit(message, commit_args)
    except (GitError, OSError) as e:
        raise click.ClickException(str(e)) from e

    logger.info("git commit exited with %d", returncode)
    sys.exit(returncode)
