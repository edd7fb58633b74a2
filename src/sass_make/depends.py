# src/sass_make/depends.py
"""Render Makefile dependency rules from the compiler's import list."""

from collections.abc import Sequence


def generate_depends(target: str, imports: Sequence[str], phony: bool) -> str:
    """Return a Make rule declaring that `target` depends on `imports`.

    Import order and duplicates are kept as the compiler reported them.
    With `phony`, every import also gets an empty rule so Make does not fail
    once a recorded import is deleted.

    Paths are not escaped; callers must pass Make-safe file names.

    >>> generate_depends("app.css", ["a.scss", "b.scss"], phony=True)
    'app.css: a.scss b.scss\\na.scss:\\nb.scss:\\n'
    """
    result = f"{target}: {' '.join(imports)}\n"
    if phony:
        result += "".join(f"{dep}:\n" for dep in imports)
    return result
