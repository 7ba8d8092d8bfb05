"""Interactive REPL for MiniLang, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer_rd import try_tokenize
from .repl_highlight import MiniLangLexer
from .runner import repl_eval
from .token_types import TT
from .types import Frame, MiniLangError
from .utils import (
    debug_py_trace_enabled,
    default_max_iterations,
    format_bindings,
    report_error,
    set_debug_py_trace,
)

# Zero-width and invisible characters to strip from input.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# Slash commands: name => (description, argument_hint).
_SLASH_CMDS = {
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
    "/vars": ("List variable bindings", ""),
}

_BLOCK_OPEN = {TT.IF, TT.WHILE}


def open_block_depth(text: str) -> int:
    """Number of if/while blocks in *text* still waiting for `end`.

    Unscannable input counts as closed so it is submitted and the error shown.
    """
    tokens = try_tokenize(text)
    if tokens is None:
        return 0

    depth = 0
    for tok in tokens:
        if tok.type in _BLOCK_OPEN:
            depth += 1
        elif tok.type == TT.END:
            depth = max(depth - 1, 0)

    return depth


class _SlashCompleter(Completer):
    """Autocomplete slash commands on the primary prompt."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


def handle_slash(line: str, frame: Frame) -> bool:
    """Handle slash commands. Returns True if the line was a command."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        if arg.lower() in ("on", "1", "true", "yes"):
            set_debug_py_trace(True)
        elif arg.lower() in ("off", "0", "false", "no"):
            set_debug_py_trace(False)
        elif arg == "":
            # Toggle.
            set_debug_py_trace(not debug_py_trace_enabled())
        else:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        state = "on" if debug_py_trace_enabled() else "off"
        print(f"Python traceback: {state}")
        return True

    if cmd == "/reset":
        frame.env.clear()
        print("Environment reset.")
        return True

    if cmd == "/vars":
        bindings = format_bindings(frame.env.snapshot())
        print(bindings if bindings else "(no variables)")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Strip invisible characters from input."""
    return _INVISIBLE_RE.sub("", text)


def repl() -> None:
    """Interactive read-eval-print loop with prompt_toolkit."""
    frame = Frame(source="", max_iterations=default_max_iterations())

    history = InMemoryHistory()
    bindings = KeyBindings()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Slash commands and closed blocks submit right away.
        if text.strip().startswith("/") or open_block_depth(text) == 0:
            buf.validate_and_handle()
            return

        # An empty line submits an unterminated block; `end` is optional at EOF.
        lines = text.split("\n")
        if len(lines) > 1 and lines[-1].strip() == "":
            buf.text = "\n".join(lines[:-1])
            buf.cursor_position = len(buf.text)
            buf.validate_and_handle()
            return

        indent = "    " * open_block_depth(text)
        buf.insert_text("\n" + indent)

    session: PromptSession[str] = PromptSession(
        history=history,
        lexer=MiniLangLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation="... ",
    )

    print("minilang repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(">>> ")
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if handle_slash(text, frame):
            continue

        try:
            result, stmt = repl_eval(text, frame)
        except MiniLangError as exc:
            report_error(exc, debug_py_trace_enabled(), frame.source)
            continue
        except KeyboardInterrupt:
            print("KeyboardInterrupt", file=sys.stderr)
            continue

        if not stmt and result is not None:
            print(result)


def main() -> None:
    repl()


if __name__ == "__main__":
    main()
