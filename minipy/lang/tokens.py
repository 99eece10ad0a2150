"""Token definitions shared by the lexer and the parser."""

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    NEWLINE = "newline"
    INDENT = "indent"
    DEDENT = "dedent"
    END = "end of input"


KEYWORDS = frozenset(["if", "elif", "else", "while", "break", "continue", "def"])
BOOLEANS = frozenset(["True", "False"])

# one-character operators that widen into a two-character operator when followed by the second character
COMPOUND_OPERATORS = frozenset(["==", "!=", "+=", "-=", "//", "**", "<=", ">="])


@dataclass(frozen=True)
class Token:
    """Minimal lexical unit. line is 1-based, column is 0-based (only used for diagnostics)."""
    kind: TokenKind
    text: str
    line: int
    column: int = 0

    def is_op(self, *texts):
        """Whether or not this token is one of the operators in texts."""
        return self.kind is TokenKind.OPERATOR and self.text in texts

    def is_keyword(self, *texts):
        return self.kind is TokenKind.KEYWORD and self.text in texts

    def describe(self):
        """Human-readable form used in error messages."""
        if self.kind in (TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT, TokenKind.END):
            return self.kind.value
        return self.text

    def __repr__(self):
        return f"Token({self.kind.name}, {self.text!r}, line={self.line})"
