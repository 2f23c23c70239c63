"""Git operations for committer."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import GitError
from .suggestions import ChangeStatus, FileChange

_FIELD_SEP = "\x1f"
_AHEAD_RE = re.compile(r"ahead (\d+)")
_BEHIND_RE = re.compile(r"behind (\d+)")
_DIGITS_RE = re.compile(r"\d+")

_CONVENTION_PREFIXES = (
    (("feature/", "feat/"), "feature"),
    (("fix/", "bugfix/"), "fix"),
    (("hotfix/",), "hotfix"),
    (("release/",), "release"),
    (("develop", "dev/"), "develop"),
)


@dataclass
class CommitInfo:
    hash: str
    message: str
    author: str = ""
    date: str = ""


@dataclass
class BranchPattern:
    """Naming habits inferred from existing local branches."""

    has_prefix: bool = False
    prefixes: list[str] = field(default_factory=list)
    separator: str = "/"
    has_ticket_numbers: bool = False
    conventions: list[str] = field(default_factory=list)


@dataclass
class StatusSummary:
    files: list[str] = field(default_factory=list)
    ahead: int = 0
    behind: int = 0


@dataclass
class RepositoryInfo:
    repo_path: str
    current_branch: str
    recent_commits: list[CommitInfo]
    branch_pattern: BranchPattern
    status: StatusSummary


def parse_name_status(output: str) -> list[FileChange]:
    """Parse ``git diff --name-status`` output.

    Renames and copies report their destination path.
    """
    changes: list[FileChange] = []
    if not output.strip():
        return changes
    for line in output.strip().split("\n"):
        if not line.strip():
            continue
        status, *paths = line.split("\t")
        if not paths:
            continue
        changes.append(FileChange(ChangeStatus.from_code(status), paths[-1]))
    return changes


def analyze_branch_naming_pattern(branches: list[str]) -> BranchPattern:
    pattern = BranchPattern()
    for branch in branches:
        if "/" in branch:
            pattern.has_prefix = True
            prefix = branch.split("/", 1)[0]
            if prefix not in pattern.prefixes:
                pattern.prefixes.append(prefix)
        if "-" in branch:
            pattern.separator = "-"
        if _DIGITS_RE.search(branch):
            pattern.has_ticket_numbers = True
        for starts, convention in _CONVENTION_PREFIXES:
            if branch.startswith(starts):
                if convention not in pattern.conventions:
                    pattern.conventions.append(convention)
                break
    return pattern


class GitRepo:
    """Read-mostly view of a Git repository used to build prompts."""

    def __init__(self, repo_path: Optional[str] = None) -> None:
        self.repo_path = Path(repo_path or Path.cwd())
        if not self._is_git_repo():
            raise GitError(f"Not a Git repository: {self.repo_path}")

    def _is_git_repo(self) -> bool:
        try:
            self._run_git_command(["rev-parse", "--git-dir"])
            return True
        except GitError:
            return False

    def _run_git_command(self, args: list[str]) -> str:
        """Run a Git command and return its output."""
        try:
            result = subprocess.run(
                ["git"] + args,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            cmd = " ".join(args)
            raise GitError(f"Git command failed: {cmd}\n{e.stderr}") from e
        except FileNotFoundError as exc:
            raise GitError("Git command not found. Please install Git.") from exc

    def has_commits(self) -> bool:
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--verify", "--quiet", "HEAD"],
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError:
            return False
        return result.returncode == 0

    def get_recent_commits(self, count: int = 10) -> list[CommitInfo]:
        """Return the ``count`` most recent commits, newest first."""
        if not self.has_commits():
            return []
        fmt = _FIELD_SEP.join(["%H", "%s", "%an", "%aI"])
        output = self._run_git_command(["log", f"-{count}", f"--pretty=format:{fmt}"])
        commits: list[CommitInfo] = []
        for line in output.split("\n") if output else []:
            parts = line.split(_FIELD_SEP)
            if len(parts) < 2:
                continue
            parts += [""] * (4 - len(parts))
            commits.append(
                CommitInfo(hash=parts[0], message=parts[1], author=parts[2], date=parts[3])
            )
        return commits

    def get_current_branch(self) -> str:
        return self._run_git_command(["branch", "--show-current"])

    def get_staged_changes(self) -> list[FileChange]:
        return parse_name_status(
            self._run_git_command(["diff", "--cached", "--name-status"])
        )

    def get_unstaged_changes(self) -> list[FileChange]:
        return parse_name_status(self._run_git_command(["diff", "--name-status"]))

    def get_detailed_diff(self, staged: bool = True) -> str:
        args = ["diff"]
        if staged:
            args.append("--cached")
        return self._run_git_command(args)

    def stage_all(self) -> None:
        """Stage all changes (including new and deleted files)."""
        self._run_git_command(["add", "-A"])

    def list_branches(self) -> list[str]:
        output = self._run_git_command(["branch", "--format=%(refname:short)"])
        return [line.strip() for line in output.split("\n") if line.strip()]

    def get_branch_pattern(self) -> BranchPattern:
        current = self.get_current_branch()
        branches = [b for b in self.list_branches() if b != current]
        return analyze_branch_naming_pattern(branches)

    def get_status_summary(self) -> StatusSummary:
        output = self._run_git_command(["status", "--porcelain=v1", "--branch"])
        summary = StatusSummary()
        for line in output.split("\n") if output else []:
            if line.startswith("## "):
                ahead = _AHEAD_RE.search(line)
                behind = _BEHIND_RE.search(line)
                summary.ahead = int(ahead.group(1)) if ahead else 0
                summary.behind = int(behind.group(1)) if behind else 0
                continue
            path = line[3:].strip()
            if path:
                summary.files.append(path)
        return summary

    def get_repository_info(self) -> RepositoryInfo:
        try:
            return RepositoryInfo(
                repo_path=str(self.repo_path),
                current_branch=self.get_current_branch(),
                recent_commits=self.get_recent_commits(5),
                branch_pattern=self.get_branch_pattern(),
                status=self.get_status_summary(),
            )
        except GitError as exc:
            raise GitError(f"Failed to get repository info: {exc}") from exc
