from __future__ import annotations

import os as _os
import sys
import traceback
from typing import Dict, Optional

DEBUG_PY_TRACE_ENV = "MINILANG_DEBUG_PY_TRACE"
MAX_ITERATIONS_ENV = "MINILANG_MAX_ITERATIONS"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def envvar_value_by_name(name: str) -> Optional[str]:
    """Get the current value of an env var by name, or None if missing."""
    return _os.environ.get(name)


def debug_py_trace_enabled() -> bool:
    raw = envvar_value_by_name(DEBUG_PY_TRACE_ENV)
    return raw is not None and raw.strip().lower() in _TRUE_VALUES


def set_debug_py_trace(enabled: bool) -> None:
    if enabled:
        _os.environ[DEBUG_PY_TRACE_ENV] = "1"
    else:
        _os.environ.pop(DEBUG_PY_TRACE_ENV, None)


def parse_iteration_limit(raw: Optional[str]) -> Optional[int]:
    """Positive integer limit, or None (unlimited) for anything else."""
    if raw is None:
        return None

    try:
        value = int(raw.strip())
    except ValueError:
        return None

    return value if value > 0 else None


def default_max_iterations() -> Optional[int]:
    return parse_iteration_limit(envvar_value_by_name(MAX_ITERATIONS_ENV))


def format_bindings(bindings: Dict[str, int]) -> str:
    """One `name = value` line per binding, in insertion order."""
    return "\n".join(f"{name} = {value}" for name, value in bindings.items())


def source_excerpt(source: str, line: int, column: Optional[int]) -> Optional[str]:
    """The offending source line with a caret under the column."""
    lines = source.splitlines()
    if not 1 <= line <= len(lines):
        return None

    text = lines[line - 1].rstrip()
    excerpt = "  " + text
    if column is not None:
        excerpt += "\n  " + " " * (column - 1) + "^"

    return excerpt


def report_error(exc: BaseException, show_trace: bool=False, source: Optional[str]=None) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    line = getattr(exc, "line", None)
    if source is not None and line is not None:
        excerpt = source_excerpt(source, line, getattr(exc, "column", None))
        if excerpt is not None:
            print(excerpt, file=sys.stderr)

    if show_trace and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
