"""
Token tables shared by the COMFY lexer and parser.

Exports:
    TERMINAL_TAGS: The closed alphabet of token types the lexer may produce.
    token_hashmap: Maps reserved words and symbols to their token type.
    TAG_DESCRIPTIONS: Human-readable names used in parser diagnostics and traces.
    describe_tag(tag): Looks up a description, falling back to the raw tag.
"""

TERMINAL_TAGS: tuple[str, ...] = (
    "LBRACE",
    "RBRACE",
    "LPAREN",
    "RPAREN",
    "ASSIGN",
    "PLUS",
    "BOOLOP",
    "PRINT",
    "WHILE",
    "IF",
    "TYPE",
    "BOOLEAN",
    "IDENT",
    "NUMBER",
    "STRING",
    "EOP",
    "ERROR",
)

# Reserved words and symbols. Anything alphabetic not listed here is an IDENT.
token_hashmap: dict[str, str] = {
    "{": "LBRACE",
    "}": "RBRACE",
    "(": "LPAREN",
    ")": "RPAREN",
    "=": "ASSIGN",
    "+": "PLUS",
    "==": "BOOLOP",
    "!=": "BOOLOP",
    "$": "EOP",
    "print": "PRINT",
    "while": "WHILE",
    "if": "IF",
    "int": "TYPE",
    "string": "TYPE",
    "boolean": "TYPE",
    "true": "BOOLEAN",
    "false": "BOOLEAN",
}

TAG_DESCRIPTIONS: dict[str, str] = {
    "LBRACE": "`{`",
    "RBRACE": "`}`",
    "LPAREN": "`(`",
    "RPAREN": "`)`",
    "ASSIGN": "assignment operator `=`",
    "PLUS": "integer operator `+`",
    "BOOLOP": "boolean operator",
    "PRINT": "`print` keyword",
    "WHILE": "`while` keyword",
    "IF": "`if` keyword",
    "TYPE": "type keyword",
    "BOOLEAN": "boolean literal",
    "IDENT": "identifier",
    "NUMBER": "numeric literal",
    "STRING": "string literal",
    "EOP": "end-of-program marker",
    "ERROR": "unrecognized character",
}


def describe_tag(tag: str) -> str:
    return TAG_DESCRIPTIONS.get(tag, tag)


__all__ = ["TAG_DESCRIPTIONS", "TERMINAL_TAGS", "describe_tag", "token_hashmap"]
