from __future__ import annotations

from typing import List

import pytest
from lark import Token, Tree

from minilang.tree import child_nodes, node_position
from tests.support.harness import parse_source


def _only_stmt(source: str) -> Tree:
    program = parse_source(source)
    assert program.data == "program"
    assert len(program.children) == 1

    stmt = program.children[0]
    assert isinstance(stmt, Tree)
    return stmt


def _count_nodes(tree: Tree, name: str) -> int:
    count = 0

    def walk(node: object) -> None:
        nonlocal count
        if not isinstance(node, Tree):
            return
        if node.data == name:
            count += 1
        for child in node.children:
            walk(child)

    walk(tree)
    return count


STATEMENT_SHAPES: List[tuple] = [
    ("x = 1", "assignstmt"),
    ("x", "exprstmt"),
    ("(1)", "exprstmt"),
    ("if (x) end", "ifstmt"),
    ("while (x) end", "whilestmt"),
    ("function f() 1", "fndef"),
]


@pytest.mark.parametrize(
    "source, label",
    [pytest.param(source, label, id=label + "-" + str(i)) for i, (source, label) in enumerate(STATEMENT_SHAPES)],
)
def test_statement_labels(source: str, label: str) -> None:
    assert _only_stmt(source).data == label


def test_binary_chains_alternate_operands_and_ops() -> None:
    stmt = _only_stmt("x = 1 + 2 * 3 - 4 / 5")

    def walk(node: object) -> None:
        if not isinstance(node, Tree):
            return
        if node.data in ("addexpr", "mulexpr"):
            assert len(node.children) % 2 == 1
            assert len(node.children) >= 3
            op_label = "addop" if node.data == "addexpr" else "mulop"
            assert all(child.data == op_label for child in node.children[1::2])
        for child in node.children:
            walk(child)

    walk(stmt)
    assert _count_nodes(stmt, "addexpr") == 1
    assert _count_nodes(stmt, "mulexpr") == 2


def test_parenthesized_chain_nests() -> None:
    stmt = _only_stmt("x = 1 - (2 - 3)")

    assert _count_nodes(stmt, "addexpr") == 2


def test_parens_leave_no_node() -> None:
    assert _only_stmt("x = ((7))").children[1] == Token("NUMBER", "7")


def test_keyword_tokens_drop_out_of_semantic_children() -> None:
    stmt = _only_stmt("if (a) b = 1 else b = 2 end")
    semantic = child_nodes(stmt)

    assert len(semantic) == 3
    assert semantic[0] == Token("IDENT", "a")
    assert all(isinstance(child, Tree) and child.data == "block" for child in semantic[1:])


def test_while_has_single_block() -> None:
    stmt = _only_stmt("while (n) n = n - 1 end")

    assert [child.data for child in child_nodes(stmt) if isinstance(child, Tree)] == ["block"]


def test_nested_blocks_stay_nested() -> None:
    stmt = _only_stmt("while (a) if (b) c = 1 end a = a - 1 end")
    body = child_nodes(stmt)[1]

    assert [child.data for child in body.children] == ["ifstmt", "assignstmt"]
    assert _count_nodes(stmt, "block") == 2


@pytest.mark.parametrize(
    "source, position",
    [
        pytest.param("x = 1", (1, 1), id="assign"),
        pytest.param("\n\n  while (n) end", (3, 3), id="keyword"),
        pytest.param("  (a + b) * c", (1, 4), id="paren-expr"),
    ],
)
def test_statement_position_is_first_token(source: str, position: tuple) -> None:
    assert node_position(_only_stmt(source)) == position
