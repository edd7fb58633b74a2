# src/sass_make/meta.py
"""Program identity shared by the CLI, logger, and tests."""

from importlib.metadata import PackageNotFoundError, version


PROGRAM_PACKAGE = "sass_make"
PROGRAM_DIST = "sass-make"
PROGRAM_SCRIPT = "sass-make"
PROGRAM_DISPLAY = "Sass Make"
PROGRAM_ENV = "SASS_MAKE"
PROGRAM_DESCRIPTION = "Compile Sass/SCSS into CSS with dependency tracking for Make."


def get_version() -> str:
    """Installed distribution version, or a placeholder for source checkouts."""
    try:
        return version(PROGRAM_DIST)
    except PackageNotFoundError:
        return "0.0.0+unknown"
