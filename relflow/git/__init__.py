"""Git operations used by the release pipeline.

Usage:
    from relflow.git import Repository

    repo = Repository(ProcessRunner(Path.cwd()), RichConsole())
    branches = repo.list_branches("release/*", sort="-committerdate")
"""

from relflow.git.repository import GitError, Repository, parse_branch_list

__all__ = [
    "GitError",
    "Repository",
    "parse_branch_list",
]
