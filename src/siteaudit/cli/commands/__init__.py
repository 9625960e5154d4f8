# siteaudit/cli/commands: Command modules for the siteaudit CLI.
#
# Each module in this package provides one or more CLI commands.

from .plan import plan
from .registry import phases, playlists, tests
from .validate import validate

__all__ = [
    # plan.py
    "plan",
    # registry.py
    "phases",
    "playlists",
    "tests",
    # validate.py
    "validate",
]
