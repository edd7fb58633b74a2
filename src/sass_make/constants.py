# src/sass_make/constants.py
"""Central constants used across the project."""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"
VERBOSE_LOG_LEVEL: str = "debug"
SILENT_LOG_LEVEL: str = "error"  # hides compiler warnings, keeps errors

# --- standard streams ---
STDIO_TOKEN: str = "-"
STDIN_PSEUDO_PATH: str = "/dev/stdin"
STDOUT_PSEUDO_PATH: str = "/dev/stdout"

# --- derived output names ---
SOURCE_MAP_SUFFIX: str = ".map"
DEPENDS_SUFFIX: str = ".d"

# --- compiler defaults ---
DEFAULT_OUTPUT_STYLE: str = "expanded"
OUTPUT_STYLES: list[str] = ["nested", "expanded", "compact", "compressed"]
IMPORT_EXTENSIONS: list[str] = [".scss", ".sass", ".css"]
# imports libsass emits as plain CSS `@import url(...)`
PLAIN_CSS_IMPORT_PREFIXES: tuple[str, ...] = ("http://", "https://", "//", "url(")
