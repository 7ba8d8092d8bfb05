from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    Environment,
    LoopLimitExceeded,
    UndefinedVariable,
    run_program,
    run_runtime_case,
)

SCENARIOS = [
    pytest.param("while (0) x = 1 end", {}, None, id="while-false-never-runs"),
    pytest.param(
        "n = 3 total = 0 while (n) total = total + n n = n - 1 end",
        {"n": 0, "total": 6},
        None,
        id="while-counts-down",
    ),
    pytest.param(
        dedent(
            """\
            n = 5
            acc = 1
            while (n)
                acc = acc * n
                n = n - 1
            end
            """
        ),
        {"n": 0, "acc": 120},
        None,
        id="while-factorial",
    ),
    pytest.param(
        dedent(
            """\
            i = 3
            count = 0
            while (i)
                j = 2
                while (j)
                    count = count + 1
                    j = j - 1
                end
                i = i - 1
            end
            """
        ),
        {"i": 0, "j": 0, "count": 6},
        None,
        id="while-nested",
    ),
    pytest.param(
        dedent(
            """\
            a = 10
            b = 4
            while (b)
                t = b
                b = a - a / b * b
                a = t
            end
            """
        ),
        {"a": 2, "b": 0, "t": 2},
        None,
        id="while-gcd",
    ),
    pytest.param(
        "n = 4 evens = 0 while (n) if (n / 2 * 2 - n) else evens = evens + 1 end n = n - 1 end",
        {"n": 0, "evens": 2},
        None,
        id="while-with-if",
    ),
    pytest.param("n = 2 while (n) n = n - 1", {"n": 0}, None, id="while-end-optional-at-eof"),
    pytest.param("while (0) x = nope end", {}, None, id="while-false-body-not-evaluated"),
    pytest.param("while (k) end", None, UndefinedVariable, id="while-undefined-guard"),
    pytest.param("n = 1 while (n) n = m end", None, UndefinedVariable, id="while-body-error-aborts"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_loops(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_constant_guard_hits_iteration_limit() -> None:
    env = Environment()

    with pytest.raises(LoopLimitExceeded) as exc_info:
        run_program("i = 0 while (1) i = i + 1 end", env, max_iterations=50)

    err = exc_info.value
    assert err.limit == 50
    assert (err.line, err.column) == (1, 7)
    assert "while (1) exceeded 50 iterations" in str(err)
    # The body ran once per permitted iteration before the run was aborted.
    assert env.get("i") == 50


def test_empty_infinite_loop_hits_iteration_limit() -> None:
    with pytest.raises(LoopLimitExceeded):
        run_program("while (1) end", max_iterations=10)


def test_loop_finishing_exactly_at_limit_is_fine() -> None:
    result = run_program("n = 5 while (n) n = n - 1 end", max_iterations=5)
    assert result == {"n": 0}


def test_limit_applies_per_loop_statement() -> None:
    source = "a = 3 while (a) a = a - 1 end b = 3 while (b) b = b - 1 end"
    assert run_program(source, max_iterations=3) == {"a": 0, "b": 0}


def test_unlimited_by_default() -> None:
    result = run_program("n = 5000 while (n) n = n - 1 end")
    assert result == {"n": 0}
