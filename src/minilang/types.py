from __future__ import annotations

from typing import Dict, Iterator, Optional

# ---------- Errors ----------

class MiniLangError(Exception):
    """Base class for every error a MiniLang run can surface."""
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str, line: Optional[int]=None, column: Optional[int]=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        msg = self.message

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class MiniLangRuntimeError(MiniLangError):
    pass

class UndefinedVariable(MiniLangRuntimeError):
    def __init__(self, name: str, line: Optional[int]=None, column: Optional[int]=None):
        super().__init__(f"Undefined variable '{name}'", line, column)
        self.name = name

class DivisionByZero(MiniLangRuntimeError):
    def __init__(self, line: Optional[int]=None, column: Optional[int]=None):
        super().__init__("Division by zero", line, column)

class LoopLimitExceeded(MiniLangRuntimeError):
    def __init__(self, limit: int, line: Optional[int]=None, column: Optional[int]=None, guard: Optional[str]=None):
        loop = f"while ({guard})" if guard is not None else "while loop"
        super().__init__(f"{loop} exceeded {limit} iterations", line, column)
        self.limit = limit
        self.guard = guard

class NestingTooDeep(MiniLangError):
    """Parentheses or blocks nested past what the recursive parser can hold."""
    def __init__(self) -> None:
        super().__init__("Program nested too deeply")

# ---------- Environment ----------

class Environment:
    """Flat, whole-run store mapping variable names to integers."""

    def __init__(self, initial: Optional[Dict[str, int]]=None):
        self.vars: Dict[str, int] = dict(initial) if initial else {}

    def get(self, name: str) -> int:
        if name in self.vars:
            return self.vars[name]

        raise UndefinedVariable(name)

    def set(self, name: str, val: int) -> None:
        self.vars[name] = val

    def snapshot(self) -> Dict[str, int]:
        return dict(self.vars)

    def clear(self) -> None:
        self.vars.clear()

    def __contains__(self, name: object) -> bool:
        return name in self.vars

    def __iter__(self) -> Iterator[str]:
        return iter(self.vars)

    def __len__(self) -> int:
        return len(self.vars)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k}: {v}" for k, v in self.vars.items())
        return "{" + pairs + "}"

# ---------- Evaluation frame ----------

class Frame:
    """Evaluator state threaded through every eval_* helper."""

    def __init__(self, env: Optional[Environment]=None, source: Optional[str]=None, max_iterations: Optional[int]=None):
        self.env = env if env is not None else Environment()
        self.source = source
        self.max_iterations = max_iterations
