from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from lark import Tree

from .evaluator import eval_node
from .parser_rd import iter_statements
from .types import Environment, Frame, MiniLangError, NestingTooDeep
from .utils import debug_py_trace_enabled, default_max_iterations, format_bindings, parse_iteration_limit, report_error

BANNER = "MiniLang Interpreter\nEnter code:"

StatementHook = Callable[[Tree], None]

def execute(src: str, frame: Frame, on_statement: Optional[StatementHook]=None) -> Tuple[Optional[int], bool]:
    """
    Parse and evaluate src one statement at a time against frame.

    Returns the value of the last statement when it was a bare expression,
    plus whether that last statement was a non-expression statement.
    """
    result: Optional[int] = None
    stmt = False

    try:
        for tree in iter_statements(src):
            if on_statement is not None:
                on_statement(tree)

            result = eval_node(tree, frame)
            stmt = tree.data != 'exprstmt'
    except RecursionError:
        raise NestingTooDeep() from None

    return result, stmt

def run(src: str, env: Optional[Environment]=None, *, max_iterations: Optional[int]=None) -> Dict[str, int]:
    """
    Run a whole program and return the final variable bindings.

    The first error aborts the run and propagates. A caller-supplied env
    keeps whatever was bound before the failure.
    """
    frame = Frame(env=env, source=src, max_iterations=max_iterations)
    execute(src, frame)
    return frame.env.snapshot()

def repl_eval(src: str, frame: Frame) -> Tuple[Optional[int], bool]:
    """Evaluate one REPL entry against the persistent frame."""
    frame.source = src
    return execute(src, frame)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        if sys.stdin.isatty():
            print(BANNER)
        return sys.stdin.read()

    candidate = Path(arg)
    try:
        is_file = candidate.is_file()
    except (OSError, ValueError):
        # Too long or otherwise unusable as a path, so it can only be source.
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[List[str]]=None) -> None:
    max_iterations = default_max_iterations()
    dump_tree = False
    show_trace = debug_py_trace_enabled()
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--dump-tree":
            dump_tree = True
            continue

        if token == "--py-traceback":
            show_trace = True
            continue

        if token.startswith("--max-iterations="):
            raw = token.split("=", 1)[1]
        elif token == "--max-iterations":
            try:
                raw = next(it)
            except StopIteration:
                raise SystemExit("--max-iterations flag requires a number") from None
        else:
            if arg is None:
                arg = token
            else:
                raise SystemExit(f"Unexpected argument: {token}")
            continue

        max_iterations = parse_iteration_limit(raw)
        if max_iterations is None:
            raise SystemExit(f"--max-iterations expects a positive integer, got {raw!r}")

    source = _load_source(arg)
    frame = Frame(source=source, max_iterations=max_iterations)

    def _dump(tree: Tree) -> None:
        print(tree.pretty(), file=sys.stderr, end="")

    try:
        execute(source, frame, on_statement=_dump if dump_tree else None)
    except MiniLangError as exc:
        report_error(exc, show_trace, frame.source)
        raise SystemExit(1) from None
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        raise SystemExit(130) from None

    print("Variables:")
    bindings = format_bindings(frame.env.snapshot())
    if bindings:
        print(bindings)

if __name__ == "__main__":
    main()
