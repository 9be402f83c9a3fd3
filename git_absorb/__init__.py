"""
git_absorb package

Provides the `git absorb` CLI entrypoint (`python -m git_absorb`) and the
helpers that graft other repositories, with their history, into
subdirectories of the current one.
"""

from .cli import main

__all__ = ["main"]
