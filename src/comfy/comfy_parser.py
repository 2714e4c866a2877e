"""
COMFY Language Parser

Checks a COMFY token sequence against the language grammar and builds the
concrete syntax tree (CST) of the derivation.

Grammar
-------
    Program             ::= Block $
    Block               ::= { StatementList }
    StatementList       ::= Statement StatementList | ε
    Statement           ::= PrintStatement | AssignmentStatement | VarDecl
                          | WhileStatement | IfStatement | Block
    PrintStatement      ::= print ( Expr )
    AssignmentStatement ::= Id = Expr
    VarDecl             ::= type Id
    WhileStatement      ::= while BooleanExpr Block
    IfStatement         ::= if BooleanExpr Block
    Expr                ::= IntExpr | StringExpr | BooleanExpr | IdExpr
    IntExpr             ::= digit intop Expr | digit
    StringExpr          ::= " CharList "
    BooleanExpr         ::= ( Expr boolop Expr ) | boolval
    IdExpr              ::= Id

Parser Behavior
---------------
- Predictive recursive descent with a single token of lookahead; tokens are
  consumed only through `expect()` and are never pushed back.
- Each rule method receives the node of the enclosing rule, attaches its own
  node beneath it and returns that node, so the tree shape follows the call stack.
- Lenient by default: a mismatch is recorded as a `Diagnostic` and parsing
  carries on with the same lookahead. Later diagnostics after a mismatch may
  be cascades of the first one.
- With `strict=True` the first mismatch raises `ParseError`.

Entry Points
------------
- `parse(tokens)`: Parse a full program and return a `ParseResult`.
- `Parser(tokens).parse()`: Same, with access to the parser state.

Raises
------
ValueError
    If the token sequence is empty or does not end with the end-of-program marker.
ParseError
    In strict mode, on the first unexpected token.
NestingError
    If nesting exceeds the interpreter's recursion limit.
"""

from __future__ import annotations

from comfy.comfy_constants import describe_tag
from comfy.comfy_lexer import Token
from comfy.comfy_tree import CSTNode, Production, SyntaxTree, Terminal


PRODUCTION_DESCRIPTIONS: dict[Production, str] = {
    Production.STATEMENT: "statement",
    Production.EXPR: "expression",
}


class Diagnostic:
    """An unexpected-token report.

    Attributes:
        expected (str | Production): The terminal tag a failed `expect` wanted, or
            the production (Statement, Expr) whose dispatch found no alternative.
        found (str): Tag of the lookahead token at the time of the failure.
        token (Token): The lookahead token itself.
        position (int): Index of that token in the input sequence.
    """

    def __init__(
        self, expected: str | Production, found: str, token: Token, position: int
    ):
        self.expected = expected
        self.found = found
        self.token = token
        self.position = position

    @property
    def message(self) -> str:
        if isinstance(self.expected, Production):
            wanted = PRODUCTION_DESCRIPTIONS[self.expected]
        else:
            wanted = describe_tag(self.expected)
        text = f"expected {wanted}, found {describe_tag(self.found)}"
        if self.token.value is not None and self.found != "EOP":
            text += f" {self.token.value!r}"
        if self.token.line:
            text += f" at line {self.token.line}, col {self.token.col}"
        return text

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"Diagnostic(expected={self.expected!r}, found={self.found!r}, "
            f"position={self.position})"
        )

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Diagnostic)
            and self.expected == other.expected
            and self.found == other.found
            and self.position == other.position
        )

    def __hash__(self) -> int:
        return hash((self.expected, self.found, self.position))


class ParseError(SyntaxError):
    """Raised by a strict parser on the first unexpected token."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(diagnostic.message)
        self.diagnostic = diagnostic


class NestingError(SyntaxError):
    """Raised when blocks or boolean expressions nest deeper than the Python stack allows."""


class ParseResult:
    """The outcome of a parse: the tree plus every diagnostic, in detection order.

    The tree is returned whether or not errors occurred; it is only a faithful
    derivation when `ok` is true.
    """

    def __init__(self, tree: SyntaxTree, diagnostics: list[Diagnostic]):
        self.tree = tree
        self.diagnostics = diagnostics

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    def messages(self) -> list[str]:
        return [d.message for d in self.diagnostics]

    def __repr__(self) -> str:
        return f"ParseResult(ok={self.ok}, diagnostics={self.diagnostics!r})"


# Lookahead tag -> rule method, for the two rules that choose between alternatives.
STATEMENT_DISPATCH: dict[str, str] = {
    "PRINT": "parse_print_statement",
    "IDENT": "parse_assignment_statement",
    "TYPE": "parse_var_decl",
    "WHILE": "parse_while_statement",
    "IF": "parse_if_statement",
    "LBRACE": "parse_block",
}

EXPR_DISPATCH: dict[str, str] = {
    "NUMBER": "parse_int_expr",
    "STRING": "parse_string_expr",
    "LPAREN": "parse_boolean_expr",
    "BOOLEAN": "parse_boolean_expr",
    "IDENT": "parse_id_expr",
}


class Parser:
    """
    COMFY Parser Class

    Attributes
    ----------
    tokens : list[Token]
        The input token sequence; by contract it ends with an `EOP` token.
    position : int
        Index of the lookahead token.
    strict : bool
        Raise `ParseError` on the first mismatch instead of recording it.
    verbose : bool
        Print a trace of rule entries, expectations and errors to stdout.
    diagnostics : list[Diagnostic]
        Mismatches recorded so far.
    tree : SyntaxTree
        The tree under construction.
    """

    def __init__(
        self, tokens: list[Token], strict: bool = False, verbose: bool = False
    ) -> None:
        if not tokens:
            raise ValueError("Cannot parse an empty token sequence")
        if tokens[-1].type != "EOP":
            raise ValueError(
                f"Token sequence must end with the end-of-program marker, got {tokens[-1]}"
            )
        self.tokens: list[Token] = list(tokens)
        self.position: int = 0
        self.strict = strict
        self.verbose = verbose
        self.diagnostics: list[Diagnostic] = []
        self.tree = SyntaxTree()

    # Token-level primitives

    def current(self) -> Token:
        return self.tokens[self.position]

    def peek(self) -> str:
        return self.tokens[self.position].type

    def advance(self) -> Token:
        """Move to the next token; once the last token is reached, stay there."""
        if self.position < len(self.tokens) - 1:
            self.position += 1
        return self.current()

    def expect(self, tag: str) -> Token | None:
        """Consume the lookahead if its tag is `tag`.

        Returns the consumed token, or None after recording a diagnostic. The
        lookahead is not moved on a mismatch.
        """
        tok = self.current()
        self.trace(f"Expecting {describe_tag(tag)}")
        self.trace(f"Found {describe_tag(tok.type)}")
        if tok.type == tag:
            self.advance()
            return tok
        self.report(tag)
        return None

    def report(self, expected: str | Production) -> None:
        diagnostic = Diagnostic(expected, self.peek(), self.current(), self.position)
        self.trace(f"ERROR: {diagnostic.message}")
        if self.strict:
            raise ParseError(diagnostic)
        self.diagnostics.append(diagnostic)

    def trace(self, message: str) -> None:
        if self.verbose:
            print(message)

    def enter(self, parent: CSTNode, production: Production) -> CSTNode:
        self.trace(f"Parsing {production.value}...")
        return parent.add(CSTNode(production))

    def terminal(self, node: CSTNode, tag: str, label: Terminal) -> None:
        if self.expect(tag) is not None:
            node.add(CSTNode(label))

    def leaf(self, node: CSTNode, tag: str, label: Production) -> None:
        tok = self.expect(tag)
        if tok is not None:
            node.add(CSTNode(label, tok.value))

    # Grammar rules

    def parse(self) -> ParseResult:
        """Parse a complete program.

        Program ::= Block $
        """
        self.trace(f"Parsing {Production.PROGRAM.value}...")
        program = self.tree.insert(CSTNode(Production.PROGRAM))
        try:
            self.parse_block(program)
        except RecursionError:
            raise NestingError(
                f"program is nested too deeply to parse (at token {self.position}, "
                f"{describe_tag(self.peek())})"
            ) from None
        self.terminal(program, "EOP", Terminal.END_OF_PROGRAM)
        return ParseResult(self.tree, self.diagnostics)

    def parse_block(self, parent: CSTNode) -> CSTNode:
        """Block ::= { StatementList }"""
        node = self.enter(parent, Production.BLOCK)
        self.terminal(node, "LBRACE", Terminal.OPEN_BRACE)
        self.parse_statement_list(node)
        self.terminal(node, "RBRACE", Terminal.CLOSE_BRACE)
        return node

    def parse_statement_list(self, parent: CSTNode) -> CSTNode:
        """StatementList ::= Statement StatementList | ε

        The list ends at `}` or at the end-of-program marker. A statement that
        consumes nothing also ends it, since the lookahead could never change.
        """
        node = self.enter(parent, Production.STATEMENT_LIST)
        while self.peek() not in ("RBRACE", "EOP"):
            before = self.position
            self.parse_statement(node)
            if self.position == before:
                break
        return node

    def parse_statement(self, parent: CSTNode) -> CSTNode:
        node = self.enter(parent, Production.STATEMENT)
        rule = STATEMENT_DISPATCH.get(self.peek())
        if rule is None:
            self.report(Production.STATEMENT)
        else:
            getattr(self, rule)(node)
        return node

    def parse_print_statement(self, parent: CSTNode) -> CSTNode:
        """PrintStatement ::= print ( Expr )"""
        node = self.enter(parent, Production.PRINT_STATEMENT)
        self.terminal(node, "PRINT", Terminal.PRINT)
        self.terminal(node, "LPAREN", Terminal.OPEN_PAREN)
        self.parse_expr(node)
        self.terminal(node, "RPAREN", Terminal.CLOSE_PAREN)
        return node

    def parse_assignment_statement(self, parent: CSTNode) -> CSTNode:
        """AssignmentStatement ::= Id = Expr"""
        node = self.enter(parent, Production.ASSIGNMENT_STATEMENT)
        self.leaf(node, "IDENT", Production.ID)
        self.terminal(node, "ASSIGN", Terminal.ASSIGN)
        self.parse_expr(node)
        return node

    def parse_var_decl(self, parent: CSTNode) -> CSTNode:
        """VarDecl ::= type Id"""
        node = self.enter(parent, Production.VAR_DECL)
        self.leaf(node, "TYPE", Production.TYPE)
        self.leaf(node, "IDENT", Production.ID)
        return node

    def parse_while_statement(self, parent: CSTNode) -> CSTNode:
        """WhileStatement ::= while BooleanExpr Block"""
        node = self.enter(parent, Production.WHILE_STATEMENT)
        self.terminal(node, "WHILE", Terminal.WHILE)
        self.parse_boolean_expr(node)
        self.parse_block(node)
        return node

    def parse_if_statement(self, parent: CSTNode) -> CSTNode:
        """IfStatement ::= if BooleanExpr Block"""
        node = self.enter(parent, Production.IF_STATEMENT)
        self.terminal(node, "IF", Terminal.IF)
        self.parse_boolean_expr(node)
        self.parse_block(node)
        return node

    def parse_expr(self, parent: CSTNode) -> CSTNode:
        """Expr is a pass-through rule: its single child is the alternative taken."""
        node = self.enter(parent, Production.EXPR)
        rule = EXPR_DISPATCH.get(self.peek())
        if rule is None:
            self.report(Production.EXPR)
        else:
            getattr(self, rule)(node)
        return node

    def parse_int_expr(self, parent: CSTNode) -> CSTNode:
        """IntExpr ::= digit intop Expr | digit

        Addition nests to the right: `1 + 2 + 3` is `1 + (2 + 3)`.

        Each further `+ digit` is nested as Expr/IntExpr under the previous
        IntExpr in a loop, so long sums do not deepen the call stack. An operand
        after `+` that is not a digit goes through the usual Expr dispatch.
        """
        node = self.enter(parent, Production.INT_EXPR)
        head = node
        while True:
            self.leaf(head, "NUMBER", Production.DIGIT)
            if self.peek() != "PLUS":
                break
            self.leaf(head, "PLUS", Production.INTOP)
            if self.peek() != "NUMBER":
                self.parse_expr(head)
                break
            expr = self.enter(head, Production.EXPR)
            head = self.enter(expr, Production.INT_EXPR)
        return node

    def parse_string_expr(self, parent: CSTNode) -> CSTNode:
        node = self.enter(parent, Production.STRING_EXPR)
        self.leaf(node, "STRING", Production.CHAR_LIST)
        return node

    def parse_boolean_expr(self, parent: CSTNode) -> CSTNode:
        """BooleanExpr ::= ( Expr boolop Expr ) | boolval"""
        node = self.enter(parent, Production.BOOLEAN_EXPR)
        if self.peek() == "BOOLEAN":
            self.leaf(node, "BOOLEAN", Production.BOOLVAL)
            return node
        self.terminal(node, "LPAREN", Terminal.OPEN_PAREN)
        self.parse_expr(node)
        self.leaf(node, "BOOLOP", Production.BOOLOP)
        self.parse_expr(node)
        self.terminal(node, "RPAREN", Terminal.CLOSE_PAREN)
        return node

    def parse_id_expr(self, parent: CSTNode) -> CSTNode:
        node = self.enter(parent, Production.ID_EXPR)
        self.leaf(node, "IDENT", Production.ID)
        return node


def parse(
    tokens: list[Token], strict: bool = False, verbose: bool = False
) -> ParseResult:
    """Parse `tokens` into a CST. See `Parser` for the meaning of the flags."""
    return Parser(tokens, strict=strict, verbose=verbose).parse()


__all__ = [
    "Diagnostic",
    "NestingError",
    "ParseError",
    "ParseResult",
    "Parser",
    "parse",
]
