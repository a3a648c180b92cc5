"""relflow: git-flow release helper (bump, changelog, merge, tag, push)."""

__version__ = "0.1.0"
