from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Optional

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from minilang.lexer_rd import InvalidCharacter, LexError
from minilang.parser_rd import ParseError, UnexpectedToken, parse_source
from minilang.runner import execute, run as run_program
from minilang.types import (
    DivisionByZero,
    Environment,
    Frame,
    LoopLimitExceeded,
    MiniLangError,
    MiniLangRuntimeError,
    NestingTooDeep,
    UndefinedVariable,
)

RuntimeExpectation = Optional[Dict[str, int]]


def eval_source(source: str, env: Optional[Environment] = None, max_iterations: Optional[int] = None) -> Optional[int]:
    """Run source and return the value of its trailing expression statement."""
    frame = Frame(env=env, source=source, max_iterations=max_iterations)
    result, _ = execute(source, frame)
    return result


def verify_bindings(actual: Dict[str, int], expected: Dict[str, int]) -> None:
    """Assert the final environment matches exactly, values and key set."""
    assert set(actual) == set(expected), f"expected names {sorted(expected)}, got {sorted(actual)}"
    for name, value in expected.items():
        assert type(actual[name]) is int, f"{name} should be an int, got {type(actual[name]).__name__}"
        assert actual[name] == value, f"{name}: expected {value}, got {actual[name]}"


def run_runtime_case(
    source: str,
    expectation: RuntimeExpectation,
    expected_exc: Optional[type],
    max_iterations: Optional[int] = None,
) -> None:
    """Execute one runtime scenario with optional expected exception."""
    if expected_exc is not None:
        with pytest.raises(expected_exc):
            run_program(source, max_iterations=max_iterations)
        return

    result = run_program(source, max_iterations=max_iterations)
    if expectation is not None:
        verify_bindings(result, expectation)
