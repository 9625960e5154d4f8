"""Packaged data files.

Holds the default project configuration used when no project config path
is supplied.
"""

from pathlib import Path

DATA_DIR = Path(__file__).parent

DEFAULT_PROJECT_CONFIG = DATA_DIR / "project-config.yaml"
