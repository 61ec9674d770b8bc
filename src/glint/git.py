"""Thin wrapper around the ``git`` executable.

Provides the working-tree status that feeds the checklist, the paged diff
viewer it launches, and the staging/commit calls the CLI makes afterwards.
"""

from __future__ import annotations

import enum
import logging
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

DEFAULT_PAGER: list[str] = ["less", "-R"]


class GitError(Exception):
    """Base class for git wrapper failures."""


class NotGitRepoError(GitError):
    def __init__(self, cwd: Path) -> None:
        super().__init__(f"{cwd} is not inside a git repository.")
        self.cwd = cwd


class GitStatusType(enum.Enum):
    ADDED = "added"
    MODIFIED = "modified"
    RENAMED = "renamed"
    UNTRACKED = "untracked"
    DELETED = "deleted"
    NONE = "none"

    @classmethod
    def from_char(cls, ch: str) -> GitStatusType | None:
        """Map a porcelain status letter to a category (``None`` if unchanged)."""
        return _STATUS_CHARS.get(ch)


_STATUS_CHARS: dict[str, GitStatusType] = {
    "A": GitStatusType.ADDED,
    "M": GitStatusType.MODIFIED,
    "R": GitStatusType.RENAMED,
    "D": GitStatusType.DELETED,
    "?": GitStatusType.UNTRACKED,
}


@dataclass
class GitStatusItem:
    file_name: str
    staged: GitStatusType | None = None
    unstaged: GitStatusType | None = None

    @property
    def status(self) -> GitStatusType:
        """The working-tree (unstaged) category, used for display."""
        return self.unstaged or GitStatusType.NONE


@dataclass
class GitStatus:
    items: list[GitStatusItem] = field(default_factory=list)

    def __iter__(self) -> Iterator[GitStatusItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def any_staged(self) -> bool:
        return any(item.staged is not None for item in self.items)

    def any_unstaged(self) -> bool:
        return any(item.unstaged is not None for item in self.items)


def parse_status_line(line: str) -> GitStatusItem | None:
    """Parse one ``git status --porcelain -z`` record (``XY <path>``).

    Paths are taken verbatim; with ``-z`` git does not quote them.
    """
    if len(line) < 4:
        return None

    staged = GitStatusType.from_char(line[0])
    # "??" marks an untracked file; only the working-tree column keeps it
    if staged is GitStatusType.UNTRACKED:
        staged = None
    unstaged = GitStatusType.from_char(line[1])

    file_name = line[3:]
    if not file_name:
        return None
    return GitStatusItem(file_name=file_name, staged=staged, unstaged=unstaged)


def parse_status(output: str) -> GitStatus:
    """Parse NUL-separated ``git status --porcelain -z`` output."""
    items = []
    records = iter(output.split("\0"))
    for record in records:
        item = parse_status_line(record)
        if item is None:
            continue
        # Renames and copies are followed by a record holding the source path
        if "R" in record[:2] or "C" in record[:2]:
            next(records, None)
        items.append(item)
    return GitStatus(items)


class Git:
    """Runs git commands for the repository containing *cwd*."""

    def __init__(self, cwd: Path, repo_root: Path, pager: Sequence[str] | None = None) -> None:
        self.cwd = cwd
        self.repo_root = repo_root
        self.pager: list[str] = list(pager or DEFAULT_PAGER)

    @classmethod
    def from_cwd(cls, cwd: str | Path | None = None) -> Git:
        """Locate the enclosing repository by walking up from *cwd*."""
        start = Path(cwd) if cwd is not None else Path.cwd()
        start = start.resolve()
        for directory in (start, *start.parents):
            if (directory / ".git").exists():
                logger.debug("repository root: %s", directory)
                return cls(start, directory)
        raise NotGitRepoError(start)

    def _run(self, args: list[str], cwd: Path, **kwargs) -> subprocess.CompletedProcess:
        logger.debug("running git %s (cwd=%s)", " ".join(args), cwd)
        return subprocess.run(["git", *args], cwd=cwd, **kwargs)

    def status(self) -> GitStatus:
        """Return the working-tree status in git's order."""
        try:
            result = self._run(
                ["status", "--porcelain", "-z"],
                self.cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except subprocess.CalledProcessError as e:
            raise GitError(f"git status failed: {e.stderr.strip()}") from e
        return parse_status(result.stdout)

    def add(self, files: Iterable[str]) -> None:
        """Stage *files*; paths are relative to the repository root."""
        result = self._run(["add", "--", *files], self.repo_root)
        if result.returncode != 0:
            raise GitError(f"git add exited with status {result.returncode}")

    def commit(self, message: str | None = None, extra_args: Sequence[str] = ()) -> int:
        """Run ``git commit`` and return its exit status."""
        args = ["commit"]
        if message is not None:
            args += ["-m", message]
        args += list(extra_args)
        return self._run(args, self.cwd).returncode

    def diff_less(self, files: Iterable[str]) -> None:
        """Show ``git diff`` for *files* (all changes if empty) in the pager.

        Blocks until the pager exits.  Raises ``OSError`` if git or the
        pager cannot be started and :class:`GitError` if git fails.
        """
        if not self.pager:
            raise GitError("no pager configured")
        files = list(files)
        logger.debug("diff %s through %s", files or "<all>", self.pager)
        diff = subprocess.Popen(
            ["git", "diff", "--color=always", "--", *files],
            cwd=self.repo_root,
            stdout=subprocess.PIPE,
        )
        try:
            subprocess.run(self.pager, cwd=self.repo_root, stdin=diff.stdout)
        finally:
            if diff.stdout is not None:
                diff.stdout.close()
            returncode = diff.wait()
        # Quitting the pager early closes the pipe under git (SIGPIPE)
        if returncode not in (0, -13, 141):
            raise GitError(f"git diff exited with status {returncode}")
