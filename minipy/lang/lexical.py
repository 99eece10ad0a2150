"""Lexical analysis for the minipy language. Converts source text (one line, or one assembled multi-line block) into a
flat list of Tokens.

Token grammar can be loosely defined as follows:

```
<number>     ::= <digit> (<digit> | ".")*       ; "1.2.3" is lexed fine, but rejected by the parser
<string>     ::= "'" <char>* "'" | '"' <char>* '"'   ; read verbatim, may span lines
<identifier> ::= (<letter> | "_") (<letter> | <digit> | "_")*
<keyword>    ::= "if" | "elif" | "else" | "while" | "break" | "continue" | "def"
<boolean>    ::= "True" | "False"
<operator>   ::= "==" | "!=" | "+=" | "-=" | "//" | "**" | "<=" | ">=" | <any other single char>

<comment>    ::= "#" <char>*                    ; up to the end of the line
```

Indentation is significant: every logical line is measured against an indent stack, emitting INDENT when the line is
deeper than the stack top and one DEDENT per popped level when it is shallower. Blank and comment-only lines are
skipped entirely and never affect the indent stack.
"""

import string

from minipy.lang.error import SyntacticError
from minipy.lang.tokens import BOOLEANS, COMPOUND_OPERATORS, KEYWORDS, Token, TokenKind


class Lexer:
    """Tokenizer with an indent stack. Reusable: every call to tokenize resets the cursor and the indent stack."""

    def __init__(self):
        self._reset("")

    def _reset(self, source):
        self.source = source
        self.pos = 0
        self.line = 1
        self.line_start = 0      # index of the first char of the current physical line
        self.at_line_start = True
        self.indent_stack = [0]
        self.tokens = []

    def tokenize(self, source):
        """Returns the list of Tokens in source, always terminated by a single END token."""
        self._reset(source)

        while self.pos < len(self.source):
            if self.at_line_start:
                self._read_indentation()
                continue

            char = self.source[self.pos]
            if char == "\n":
                self._emit(TokenKind.NEWLINE, "\n", self.pos)
                self._next_line(self.pos + 1)
            elif char.isspace():
                self.pos += 1
            elif char == "#":
                self._skip_comment()
            elif char in string.digits:
                self._read_number()
            elif char in "\"'":
                self._read_string()
            elif char.isalpha() or char == "_":
                self._read_identifier()
            else:
                self._read_operator()

        return self._finish()

    def _emit(self, kind, text, pos, line=None, line_start=None):
        line = self.line if line is None else line
        line_start = self.line_start if line_start is None else line_start
        self.tokens.append(Token(kind, text, line, pos - line_start))

    def _next_line(self, pos):
        self.pos = pos
        self.line += 1
        self.line_start = pos
        self.at_line_start = True

    def _line_text(self, line_start):
        end = self.source.find("\n", line_start)
        return self.source[line_start:end if end != -1 else len(self.source)]

    def _error(self, msg, exprs=None, pos=None, end=None, line=None, line_start=None):
        line = self.line if line is None else line
        line_start = self.line_start if line_start is None else line_start
        start = (self.pos if pos is None else pos) - line_start
        end = end - line_start if end is not None else -1
        return SyntacticError(msg, exprs, start=start, end=end, line=line, source=self._line_text(line_start))

    def _skip_comment(self):
        while self.pos < len(self.source) and self.source[self.pos] != "\n":
            self.pos += 1

    def _read_indentation(self):
        """Measures leading whitespace of a new logical line and emits INDENT/DEDENT tokens."""
        start = self.pos
        while self.pos < len(self.source) and self.source[self.pos].isspace() and self.source[self.pos] != "\n":
            self.pos += 1
        width = self.pos - start

        if self.pos >= len(self.source) or self.source[self.pos] in "\n#":
            self._skip_comment()  # blank/comment-only line: invisible to the indent stack
            if self.pos < len(self.source):
                self._next_line(self.pos + 1)
            return

        self.at_line_start = False
        if width > self.indent_stack[-1]:
            self.indent_stack.append(width)
            self._emit(TokenKind.INDENT, "", self.pos)

        elif width < self.indent_stack[-1]:
            while width < self.indent_stack[-1]:
                self.indent_stack.pop()
                self._emit(TokenKind.DEDENT, "", self.pos)

            if width != self.indent_stack[-1]:
                raise self._error("unindent does not match any outer indentation level", pos=start, end=self.pos)

    def _read_number(self):
        start = self.pos
        while self.pos < len(self.source) and (self.source[self.pos] in string.digits or self.source[self.pos] == "."):
            self.pos += 1
        self._emit(TokenKind.NUMBER, self.source[start:self.pos], start)

    def _read_string(self):
        quote = self.source[self.pos]
        start, line, line_start = self.pos, self.line, self.line_start
        self.pos += 1

        while self.pos < len(self.source) and self.source[self.pos] != quote:
            if self.source[self.pos] == "\n":
                self.line += 1
                self.line_start = self.pos + 1
            self.pos += 1

        if self.pos >= len(self.source):
            raise self._error("unterminated string literal", pos=start, line=line, line_start=line_start)

        text = self.source[start + 1:self.pos]
        self.pos += 1
        self._emit(TokenKind.STRING, text, start, line, line_start)

    def _read_identifier(self):
        start = self.pos
        while self.pos < len(self.source) and (self.source[self.pos].isalnum() or self.source[self.pos] == "_"):
            self.pos += 1
        word = self.source[start:self.pos]

        if word in KEYWORDS:
            kind = TokenKind.KEYWORD
        elif word in BOOLEANS:
            kind = TokenKind.BOOLEAN
        else:
            kind = TokenKind.IDENTIFIER
        self._emit(kind, word, start)

    def _read_operator(self):
        start = self.pos
        pair = self.source[start:start + 2]
        if pair in COMPOUND_OPERATORS:
            self.pos += 2
            self._emit(TokenKind.OPERATOR, pair, start)
        else:
            self.pos += 1
            self._emit(TokenKind.OPERATOR, self.source[start], start)

    def _finish(self):
        """Closes the last logical line, flushes pending DEDENTs and appends END."""
        if self.tokens and self.tokens[-1].kind is not TokenKind.NEWLINE:
            self._emit(TokenKind.NEWLINE, "", self.pos)

        while len(self.indent_stack) > 1:
            self.indent_stack.pop()
            self._emit(TokenKind.DEDENT, "", self.pos)

        self._emit(TokenKind.END, "", self.pos)
        return self.tokens


def tokenize(source):
    """Shortcut for Lexer().tokenize(source)."""
    return Lexer().tokenize(source)
