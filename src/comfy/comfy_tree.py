"""
Defines the concrete syntax tree (CST) produced by the COMFY parser.

Classes:
    Production:
        Closed set of non-terminal labels, one per grammar rule (plus the
        lexeme-bearing leaves such as Id or Digit).

    Terminal:
        Closed set of literal-syntax labels (`{`, `print`, `$`, ...).

    CSTNode:
        A labeled tree vertex with ordered children and a parent back-reference.

    SyntaxTree:
        Owns the root node and a movable cursor used for cursor-relative insertion.

    CSTDict:
        TypedDict shape of a serialized CSTNode, suitable for JSON output.

The CST is a literal trace of the derivation: every production applied is a
node, including pass-through rules such as Expr, and children appear in the
order they were consumed. Trees are append-only while being built and are
handed to later stages read-only.

Example:
    tree = SyntaxTree()
    program = tree.insert(CSTNode(Production.PROGRAM))
    block = program.add(CSTNode(Production.BLOCK))
    block.add(CSTNode(Terminal.OPEN_BRACE))
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any, TypedDict, Union


class Production(Enum):
    PROGRAM = "Program"
    BLOCK = "Block"
    STATEMENT_LIST = "StatementList"
    STATEMENT = "Statement"
    PRINT_STATEMENT = "PrintStatement"
    ASSIGNMENT_STATEMENT = "AssignmentStatement"
    VAR_DECL = "VarDecl"
    WHILE_STATEMENT = "WhileStatement"
    IF_STATEMENT = "IfStatement"
    EXPR = "Expr"
    INT_EXPR = "IntExpr"
    STRING_EXPR = "StringExpr"
    BOOLEAN_EXPR = "BooleanExpr"
    ID_EXPR = "IdExpr"
    DIGIT = "Digit"
    INTOP = "Intop"
    ID = "Id"
    TYPE = "Type"
    CHAR_LIST = "CharList"
    BOOLVAL = "Boolval"
    BOOLOP = "Boolop"


class Terminal(Enum):
    OPEN_BRACE = "{"
    CLOSE_BRACE = "}"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    ASSIGN = "="
    PRINT = "print"
    WHILE = "while"
    IF = "if"
    END_OF_PROGRAM = "$"


Label = Union[Production, Terminal]

# Only these labels carry the source lexeme.
LEXEME_LABELS: frozenset[Production] = frozenset(
    {
        Production.DIGIT,
        Production.INTOP,
        Production.ID,
        Production.TYPE,
        Production.CHAR_LIST,
        Production.BOOLVAL,
        Production.BOOLOP,
    }
)


class CSTDict(TypedDict):
    """
    TypedDict representation of a CSTNode used for serialization.

    Fields:
        label (str): The production name or terminal lexeme.
        terminal (bool): True for terminal labels, False for productions.
        attribute (str | None): Source lexeme for identifier/literal/type/operator leaves.
        children (list[CSTDict]): Child nodes in insertion order.
    """

    label: str
    terminal: bool
    attribute: str | None
    children: list["CSTDict"]


class CSTNode:
    """
    A node in the COMFY concrete syntax tree.

    Args:
        label (Production | Terminal): The grammar symbol this node records.
        attribute (str, optional): The source lexeme; only allowed on labels in LEXEME_LABELS.

    Attributes:
        label (Production | Terminal): Grammar symbol.
        attribute (str | None): Source lexeme, if any.
        children (list[CSTNode]): Ordered children, left-to-right parse order.
        parent (CSTNode | None): Non-owning back-reference; None for the root.

    Raises:
        ValueError: If an attribute is given for a label that does not carry one.
    """

    def __init__(self, label: Label, attribute: str | None = None):
        if attribute is not None and label not in LEXEME_LABELS:
            raise ValueError(f"{label.value} nodes do not carry an attribute")
        self.label = label
        self.attribute = attribute
        self.children: list["CSTNode"] = []
        self.parent: "CSTNode | None" = None

    @property
    def is_terminal(self) -> bool:
        return isinstance(self.label, Terminal)

    @property
    def is_production(self) -> bool:
        return isinstance(self.label, Production)

    def add(self, child: "CSTNode") -> "CSTNode":
        """Append `child` as the last child of this node and return it.

        Raises:
            ValueError: If `child` is already attached elsewhere.
        """
        if child.parent is not None:
            raise ValueError(f"{child!r} already has a parent")
        child.parent = self
        self.children.append(child)
        return child

    def walk(self) -> Iterator["CSTNode"]:
        """Yield this node and its descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def summary(self) -> str:
        """One-line description of this node alone, without its children."""
        if self.attribute is not None:
            return f"{self.label.value}={self.attribute!r}"
        return self.label.value

    def __repr__(self) -> str:
        parts = [self.label.value]
        if self.attribute is not None:
            parts.append(f"attribute={self.attribute!r}")
        if self.children:
            preview = ", ".join(c.summary() for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"CSTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, CSTNode):
            return False
        pairs: list[tuple[CSTNode, CSTNode]] = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if (
                a.label != b.label
                or a.attribute != b.attribute
                or len(a.children) != len(b.children)
            ):
                return False
            pairs.extend(zip(a.children, b.children))
        return True

    def to_dict(self) -> CSTDict:
        def shallow(node: CSTNode) -> CSTDict:
            return {
                "label": node.label.value,
                "terminal": node.is_terminal,
                "attribute": node.attribute,
                "children": [],
            }

        root = shallow(self)
        stack = [(self, root)]
        while stack:
            node, out = stack.pop()
            for child in node.children:
                child_dict = shallow(child)
                out["children"].append(child_dict)
                stack.append((child, child_dict))
        return root


class SyntaxTree:
    """
    Rooted, ordered tree of CSTNodes with a cursor marking the node being expanded.

    `insert` attaches under the cursor and descends into the new node; `ascend`
    returns the cursor to its parent. The parser itself builds through node
    handles (`CSTNode.add`) and only uses `insert` to place the root, so the
    cursor is available to callers who prefer cursor-relative construction.

    Attributes:
        root (CSTNode | None): The root node, None while the tree is empty.
        cursor (CSTNode | None): The current node; always reachable from root.
    """

    def __init__(self) -> None:
        self.root: CSTNode | None = None
        self.cursor: CSTNode | None = None

    def insert(self, node: CSTNode) -> CSTNode:
        """Attach `node` under the cursor (or as root), move the cursor to it, return it."""
        if self.cursor is None:
            if node.parent is not None:
                raise ValueError(f"{node!r} already has a parent")
            self.root = node
        else:
            self.cursor.add(node)
        self.cursor = node
        return node

    def ascend(self) -> CSTNode:
        """Move the cursor to its parent and return the new cursor.

        Raises:
            IndexError: If the tree is empty or the cursor is already at the root.
        """
        if self.cursor is None or self.cursor.parent is None:
            raise IndexError("cannot ascend above the root of the syntax tree")
        self.cursor = self.cursor.parent
        return self.cursor

    def walk(self) -> Iterator[CSTNode]:
        if self.root is not None:
            yield from self.root.walk()

    def __iter__(self) -> Iterator[CSTNode]:
        return self.walk()

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())

    def to_dict(self) -> CSTDict | None:
        return self.root.to_dict() if self.root is not None else None

    def render(self) -> str:
        """Render the tree as indented text, one node per line.

        Productions render as `<Name>` (with the lexeme after it for leaves
        that carry one), terminals as `[lexeme]`; each level of depth adds a dash.
        """
        lines: list[str] = []
        stack: list[tuple[CSTNode, int]] = [(self.root, 0)] if self.root is not None else []
        while stack:
            node, depth = stack.pop()
            pad = "-" * depth
            if node.is_terminal:
                lines.append(f"{pad}[{node.label.value}]")
            elif node.attribute is not None:
                lines.append(f"{pad}<{node.label.value}> {node.attribute}")
            else:
                lines.append(f"{pad}<{node.label.value}>")
            stack.extend((child, depth + 1) for child in reversed(node.children))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"SyntaxTree(root={self.root!r})"


__all__ = [
    "CSTDict",
    "CSTNode",
    "LEXEME_LABELS",
    "Label",
    "Production",
    "SyntaxTree",
    "Terminal",
]
