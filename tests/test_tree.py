import hypothesis.strategies as st
import pytest
from hypothesis import given

from comfy.comfy_tree import (
    LEXEME_LABELS,
    CSTNode,
    Production,
    SyntaxTree,
    Terminal,
)


def test_cstnode_repr() -> None:
    node = CSTNode(Production.ID, "x")
    assert repr(node) == "CSTNode(Id, attribute='x')"


def test_cstnode_repr_terminal() -> None:
    assert repr(CSTNode(Terminal.OPEN_BRACE)) == "CSTNode({)"


def test_cstnode_eq_equal() -> None:
    assert CSTNode(Production.ID, "x") == CSTNode(Production.ID, "x")


def test_cstnode_eq_not_equal_label() -> None:
    assert CSTNode(Production.ID, "x") != CSTNode(Production.TYPE, "x")


def test_cstnode_eq_not_equal_children() -> None:
    n1 = CSTNode(Production.ID_EXPR)
    n1.add(CSTNode(Production.ID, "x"))
    n2 = CSTNode(Production.ID_EXPR)
    n2.add(CSTNode(Production.ID, "y"))
    assert n1 != n2


def test_cstnode_eq_ignores_parent() -> None:
    parent = CSTNode(Production.ID_EXPR)
    attached = parent.add(CSTNode(Production.ID, "x"))
    assert attached == CSTNode(Production.ID, "x")


def test_cstnode_eq_non_cstnode() -> None:
    assert CSTNode(Production.BLOCK) != "Block"


@pytest.mark.parametrize("label", sorted(LEXEME_LABELS, key=lambda p: p.value))  # type: ignore[misc]
def test_lexeme_labels_accept_attribute(label: Production) -> None:
    assert CSTNode(label, "v").attribute == "v"


@pytest.mark.parametrize(  # type: ignore[misc]
    "label", [Production.BLOCK, Production.EXPR, Terminal.PRINT, Terminal.END_OF_PROGRAM]
)
def test_other_labels_reject_attribute(label: Production | Terminal) -> None:
    with pytest.raises(ValueError, match="do not carry an attribute"):
        CSTNode(label, "v")


def test_terminal_and_production_flags() -> None:
    assert CSTNode(Terminal.IF).is_terminal
    assert not CSTNode(Terminal.IF).is_production
    assert CSTNode(Production.IF_STATEMENT).is_production
    assert not CSTNode(Production.IF_STATEMENT).is_terminal


def test_add_sets_parent_and_returns_child() -> None:
    parent = CSTNode(Production.BLOCK)
    child = CSTNode(Terminal.OPEN_BRACE)
    assert parent.add(child) is child
    assert child.parent is parent
    assert parent.children == [child]


def test_add_preserves_insertion_order() -> None:
    block = CSTNode(Production.BLOCK)
    block.add(CSTNode(Terminal.OPEN_BRACE))
    block.add(CSTNode(Production.STATEMENT_LIST))
    block.add(CSTNode(Terminal.CLOSE_BRACE))
    assert [c.label for c in block.children] == [
        Terminal.OPEN_BRACE,
        Production.STATEMENT_LIST,
        Terminal.CLOSE_BRACE,
    ]


def test_add_rejects_node_with_parent() -> None:
    first = CSTNode(Production.BLOCK)
    second = CSTNode(Production.BLOCK)
    child = first.add(CSTNode(Terminal.OPEN_BRACE))
    with pytest.raises(ValueError, match="already has a parent"):
        second.add(child)


def test_walk_is_preorder() -> None:
    expr = CSTNode(Production.EXPR)
    int_expr = expr.add(CSTNode(Production.INT_EXPR))
    int_expr.add(CSTNode(Production.DIGIT, "1"))
    int_expr.add(CSTNode(Production.INTOP, "+"))
    labels = [n.label for n in expr.walk()]
    assert labels == [
        Production.EXPR,
        Production.INT_EXPR,
        Production.DIGIT,
        Production.INTOP,
    ]


def test_to_dict() -> None:
    stmt = CSTNode(Production.VAR_DECL)
    stmt.add(CSTNode(Production.TYPE, "int"))
    stmt.add(CSTNode(Production.ID, "x"))
    d = stmt.to_dict()
    assert d["label"] == "VarDecl"
    assert d["terminal"] is False
    assert d["attribute"] is None
    assert [c["attribute"] for c in d["children"]] == ["int", "x"]


def test_to_dict_terminal() -> None:
    d = CSTNode(Terminal.END_OF_PROGRAM).to_dict()
    assert d == {"label": "$", "terminal": True, "attribute": None, "children": []}


def test_cstnode_repr_truncates_children() -> None:
    node = CSTNode(Production.STATEMENT_LIST)
    for _ in range(5):
        node.add(CSTNode(Production.STATEMENT))
    r = repr(node)
    assert "children=[" in r
    assert "..." in r


def test_cstnode_repr_shows_all_children_if_three_or_fewer() -> None:
    node = CSTNode(Production.STATEMENT_LIST)
    for _ in range(3):
        node.add(CSTNode(Production.STATEMENT))
    assert "..." not in repr(node)


@given(st.text())  # type: ignore[misc]
def test_attribute_round_trips_through_to_dict(value: str) -> None:
    assert CSTNode(Production.CHAR_LIST, value).to_dict()["attribute"] == value


# SyntaxTree


def test_empty_tree() -> None:
    tree = SyntaxTree()
    assert tree.root is None
    assert tree.cursor is None
    assert len(tree) == 0
    assert tree.to_dict() is None
    assert tree.render() == ""


def test_insert_sets_root_and_cursor() -> None:
    tree = SyntaxTree()
    root = tree.insert(CSTNode(Production.PROGRAM))
    assert tree.root is root
    assert tree.cursor is root
    assert root.parent is None


def test_insert_descends_into_new_node() -> None:
    tree = SyntaxTree()
    root = tree.insert(CSTNode(Production.PROGRAM))
    block = tree.insert(CSTNode(Production.BLOCK))
    brace = tree.insert(CSTNode(Terminal.OPEN_BRACE))
    assert root.children == [block]
    assert block.children == [brace]
    assert tree.cursor is brace


def test_ascend_returns_to_parent() -> None:
    tree = SyntaxTree()
    root = tree.insert(CSTNode(Production.PROGRAM))
    block = tree.insert(CSTNode(Production.BLOCK))
    tree.insert(CSTNode(Terminal.OPEN_BRACE))
    assert tree.ascend() is block
    tree.insert(CSTNode(Production.STATEMENT_LIST))
    assert [c.label for c in block.children] == [
        Terminal.OPEN_BRACE,
        Production.STATEMENT_LIST,
    ]
    tree.ascend()
    assert tree.ascend() is root


def test_ascend_past_root_raises() -> None:
    tree = SyntaxTree()
    tree.insert(CSTNode(Production.PROGRAM))
    with pytest.raises(IndexError):
        tree.ascend()


def test_ascend_on_empty_tree_raises() -> None:
    with pytest.raises(IndexError):
        SyntaxTree().ascend()


def test_insert_rejects_attached_root() -> None:
    parent = CSTNode(Production.PROGRAM)
    child = parent.add(CSTNode(Production.BLOCK))
    with pytest.raises(ValueError):
        SyntaxTree().insert(child)


@given(st.lists(st.booleans(), max_size=40))  # type: ignore[misc]
def test_cursor_stays_reachable_from_root(moves: list[bool]) -> None:
    tree = SyntaxTree()
    root = tree.insert(CSTNode(Production.PROGRAM))
    for descend in moves:
        if descend:
            tree.insert(CSTNode(Production.BLOCK))
        elif tree.cursor is not root:
            tree.ascend()
        node = tree.cursor
        while node is not None and node is not root:
            node = node.parent
        assert node is root


def test_len_and_iter() -> None:
    tree = SyntaxTree()
    root = tree.insert(CSTNode(Production.PROGRAM))
    root.add(CSTNode(Production.BLOCK))
    root.add(CSTNode(Terminal.END_OF_PROGRAM))
    assert len(tree) == 3
    assert [n.label for n in tree] == [
        Production.PROGRAM,
        Production.BLOCK,
        Terminal.END_OF_PROGRAM,
    ]


def test_render() -> None:
    tree = SyntaxTree()
    root = tree.insert(CSTNode(Production.PROGRAM))
    block = root.add(CSTNode(Production.BLOCK))
    block.add(CSTNode(Terminal.OPEN_BRACE))
    decl = block.add(CSTNode(Production.STATEMENT_LIST)).add(
        CSTNode(Production.STATEMENT)
    ).add(CSTNode(Production.VAR_DECL))
    decl.add(CSTNode(Production.TYPE, "int"))
    decl.add(CSTNode(Production.ID, "x"))
    block.add(CSTNode(Terminal.CLOSE_BRACE))
    root.add(CSTNode(Terminal.END_OF_PROGRAM))
    assert tree.render().splitlines() == [
        "<Program>",
        "-<Block>",
        "--[{]",
        "--<StatementList>",
        "---<Statement>",
        "----<VarDecl>",
        "-----<Type> int",
        "-----<Id> x",
        "--[}]",
        "-[$]",
    ]


def deep_chain(depth: int) -> CSTNode:
    root = CSTNode(Production.EXPR)
    tail = root
    for _ in range(depth):
        tail = tail.add(CSTNode(Production.EXPR))
    tail.add(CSTNode(Production.DIGIT, "7"))
    return root


def test_deep_tree_operations() -> None:
    depth = 5000
    tree = SyntaxTree()
    tree.insert(deep_chain(depth))
    assert len(tree) == depth + 2
    assert tree.root == deep_chain(depth)
    assert tree.root != CSTNode(Production.EXPR)

    lines = tree.render().splitlines()
    assert len(lines) == depth + 2
    assert lines[-1] == "-" * (depth + 1) + "<Digit> 7"

    data = tree.to_dict()
    assert data is not None
    for _ in range(depth + 1):
        (data,) = data["children"]
    assert data["label"] == "Digit"
    assert data["attribute"] == "7"
    assert repr(tree.root).startswith("CSTNode(Expr")


def test_deep_trees_differing_at_the_leaf() -> None:
    left = deep_chain(3000)
    right = deep_chain(3000)
    leaf = list(right.walk())[-1]
    leaf.attribute = "8"
    assert left != right
