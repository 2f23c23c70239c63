"""Prompt construction from repository data."""

from __future__ import annotations

from typing import Iterable, Optional

from .config import ContextFile
from .git import CommitInfo, RepositoryInfo
from .suggestions import FileChange

DIFF_PROMPT_LIMIT = 2000
TRUNCATION_MARKER = "\n... (truncated)"

BRANCH_INSTRUCTIONS = """Please generate 3-5 branch name suggestions that:
1. Follow the existing naming conventions from this repository
2. Are descriptive but concise (max {max_length} characters)
3. Use appropriate prefixes if the repo uses them
4. Include ticket numbers if that's the pattern
5. Are lowercase with appropriate separators

Return as JSON array with objects containing 'name' and 'description' fields."""

COMMIT_INSTRUCTIONS = """Please generate 3-4 commit message suggestions that:
1. Follow conventional commit format if the repo uses it
2. Are concise but descriptive (max {max_length} characters for subject)
3. Match the style of recent commits in this repository
4. Accurately describe what was changed and why
5. Use appropriate commit types (feat, fix, docs, style, refactor, test, chore)

Return as JSON array with objects containing:
- 'message': the commit subject line
- 'body': optional longer description (if needed)
- 'type': the commit type used"""


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def truncate_diff(diff: str, limit: int = DIFF_PROMPT_LIMIT) -> str:
    if len(diff) <= limit:
        return diff
    return diff[:limit] + TRUNCATION_MARKER


def _context_block(context: Optional[ContextFile]) -> str:
    if not context:
        return ""
    return f"\n\nADDITIONAL CONTEXT (from {context.path}):\n{context.content}"


def build_branch_prompt(
    repo_info: RepositoryInfo,
    context: Optional[ContextFile] = None,
    max_length: int = 50,
) -> str:
    pattern = repo_info.branch_pattern
    commit_lines = [
        f"- {commit.message} ({commit.author})" for commit in repo_info.recent_commits[:5]
    ]
    parts = [
        "Generate a branch name based on the following repository information:",
        "",
        "REPOSITORY CONTEXT:",
        f"- Current branch: {repo_info.current_branch}",
        f"- Repository path: {repo_info.repo_path}",
        "",
        "RECENT COMMITS:",
        "\n".join(commit_lines),
        "",
        "BRANCH NAMING PATTERNS:",
        f"- Has prefixes: {_bool_text(pattern.has_prefix)}",
        f"- Common prefixes: {', '.join(pattern.prefixes) or 'none'}",
        f"- Separator: {pattern.separator}",
        f"- Uses ticket numbers: {_bool_text(pattern.has_ticket_numbers)}",
        f"- Conventions: {', '.join(pattern.conventions) or 'none'}",
        "",
        "CURRENT STATUS:",
        f"- Files changed: {len(repo_info.status.files)}",
        f"- Branch ahead: {repo_info.status.ahead}",
        f"- Branch behind: {repo_info.status.behind}",
    ]
    prompt = "\n".join(parts) + _context_block(context)
    return prompt + "\n\n" + BRANCH_INSTRUCTIONS.format(max_length=max_length)


def build_commit_prompt(
    changes: Iterable[FileChange],
    diff: str,
    recent_commits: Iterable[CommitInfo],
    context: Optional[ContextFile] = None,
    max_length: int = 72,
) -> str:
    change_lines = [f"- {change.status.value}: {change.file}" for change in changes]
    history_lines = [f"- {commit.message}" for commit in recent_commits]
    parts = [
        "Generate a commit message based on the following staged changes:",
        "",
        "STAGED CHANGES:",
        "\n".join(change_lines),
        "",
        "DETAILED DIFF:",
        "```diff",
        truncate_diff(diff),
        "```",
        "",
        "RECENT COMMIT HISTORY (for style reference):",
        "\n".join(history_lines),
    ]
    prompt = "\n".join(parts) + _context_block(context)
    return prompt + "\n\n" + COMMIT_INSTRUCTIONS.format(max_length=max_length)
