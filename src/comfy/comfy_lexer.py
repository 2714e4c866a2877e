"""
Lexical analyzer for the COMFY programming language.

This module turns raw source text into the classified token sequence consumed
by the COMFY parser:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.

Features:
    - Skips whitespace and single-line comments (`#`)
    - Supports longest-match recognition of symbols (`==` before `=`)
    - Recognizes:
        * Identifiers, keywords, type keywords and boolean literals
        * Numerals
        * Double-quoted strings
        * Braces, parentheses and operators
        * The end-of-program marker `$` (synthesized at end of input if absent)

Raises:
    SyntaxError: If an unterminated string is encountered.

Example:
    >>> tokenize("{ print(1) } $")
    [Token(LBRACE, {), Token(PRINT, print), Token(LPAREN, (), Token(NUMBER, 1), Token(RPAREN, )), Token(RBRACE, }), Token(EOP, $)]

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
    - token_hashmap
"""

from typing import Any

from comfy.comfy_constants import token_hashmap


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """Represents a single lexical token in the COMFY language.

    Attributes:
        type (str): The terminal tag (e.g. 'IDENT', 'LBRACE', 'EOP').
        value (str | None): The lexeme carried by the token, if any.
        line (int): The 1-based line number where the token appears (0 if unknown).
        col (int): The 1-based column number where the token starts (0 if unknown).
    """

    def __init__(
        self, type_: str, value: str | None = None, line: int = 0, col: int = 0
    ):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


class Lexer:
    """Lexical analyzer for the COMFY language.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek() in " \t\r\n":
                self.advance()
            elif self.peek() == "#":
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_symbol(self) -> Token | None:
        """Attempts to match the longest reserved symbol from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        line, col = self.stream.line, self.stream.column
        best = None
        match_len = 0
        candidate = ""

        for i in range(2):  # longest symbol is two characters
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                best = candidate
                match_len = i + 1

        if best:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[best], best, line, col)

        return None

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; an `EOP` token once the input is exhausted.

        Raises:
            SyntaxError: If an unterminated string is encountered.
        """
        self.skip_whitespace()

        if self.stream.end_of_file():
            return Token("EOP", "$", self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch.isalpha():
            word = ""
            while not self.stream.end_of_file() and (
                self.peek().isalnum() or self.peek() == "_"
            ):
                word += self.advance()
            if word in token_hashmap:
                return Token(token_hashmap[word], word, line, col)
            return Token("IDENT", word, line, col)

        # 2. Numeral
        if ch.isdigit():
            num = ""
            while not self.stream.end_of_file() and self.peek().isdigit():
                num += self.advance()
            return Token("NUMBER", num, line, col)

        # 3. String
        if ch == '"':
            self.advance()
            val = ""
            while not self.stream.end_of_file() and self.peek() not in ('"', "\n"):
                val += self.advance()
            if self.peek() == '"':
                self.advance()
                return Token("STRING", val, line, col)
            raise SyntaxError(f"Unterminated string at line {line}, col {col}")

        # 4. Symbol
        token = self.match_symbol()
        if token:
            return token

        # 5. Unknown character, left for the parser to report
        return Token("ERROR", self.advance(), line, col)


def tokenize(source: str) -> list[Token]:
    """Lex `source` up to and including the first end-of-program marker."""
    lexer = Lexer(CharacterStream(source, 0, 1, 1))
    tokens = []
    while True:
        tok = lexer.next_token()
        tokens.append(tok)
        if tok.type == "EOP":
            break
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap", "tokenize"]
