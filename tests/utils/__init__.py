# tests/utils/__init__.py

from .constants import DEFAULT_TEST_LOG_LEVEL
from .patch_everywhere import patch_everywhere
from .sources import (
    inline_map_text,
    make_nested_sass_project,
    make_sass_project,
    resolve_map_sources,
)


__all__ = [  # noqa: RUF022
    # constants
    "DEFAULT_TEST_LOG_LEVEL",
    # patch_everywhere
    "patch_everywhere",
    # sources
    "inline_map_text",
    "make_nested_sass_project",
    "make_sass_project",
    "resolve_map_sources",
]
