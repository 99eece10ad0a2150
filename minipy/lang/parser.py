"""Parser for the minipy language: turns the Token list produced by the lexer into AST nodes (see nodes.py).

Grammar, lowest to highest binding:

```
<statement>  ::= <if_stmt> | <while_stmt> | "break" | "continue" | <assignment>

<if_stmt>    ::= "if" <assignment> ":" <block> ("elif" <assignment> ":" <block>)* ("else" ":" <block>)?
<while_stmt> ::= "while" <assignment> ":" <block> ("else" ":" <block>)?
<block>      ::= NEWLINE INDENT (<statement> NEWLINE?)* DEDENT

<assignment> ::= <comparison> ("=" <assignment>)?         ; right-associative, target must be a variable
<comparison> ::= <sum> (("==" | "!=" | "<" | "<=" | ">" | ">=") <sum>)*   ; one chained Compare node
<sum>        ::= <term> (("+" | "-") <term>)*
<term>       ::= <unary> (("*" | "/" | "//" | "%") <unary>)*
<unary>      ::= "-" <unary> | <power>                     ; -x is parsed as 0 - x
<power>      ::= <primary> ("**" <unary>)?                 ; right operand recurses through <unary>
<primary>    ::= NUMBER | STRING | BOOLEAN | IDENTIFIER | "(" <assignment> ")"
```

Because the right operand of "**" is a <unary>, 2 ** 3 ** 2 is 2 ** (3 ** 2) and 2 ** -1 is accepted.
"""

from minipy.lang.error import SyntacticError
from minipy.lang.nodes import Assignment, BinaryOp, Break, Compare, Continue, If, Literal, Variable, While
from minipy.lang.operators import ADDITIVE, COMPARISONS, MULTIPLICATIVE, POWER
from minipy.lang.tokens import Token, TokenKind
from minipy.lang.values import MAX_INT_DIGITS, Value


class Parser:
    """Cursor over a Token list. Each call to parse consumes exactly one statement."""

    def __init__(self, tokens, source=""):
        self.tokens = list(tokens)
        self.current = 0
        self.lines = source.split("\n")  # only used to attach source lines to errors

        if not self.tokens or self.tokens[-1].kind is not TokenKind.END:
            line = self.tokens[-1].line if self.tokens else 1
            self.tokens.append(Token(TokenKind.END, "", line))

    def peek(self):
        """Current token, without advancing. Past the end, the END token is returned."""
        return self.tokens[min(self.current, len(self.tokens) - 1)]

    def advance(self):
        """Returns the current token and moves past it (never past END)."""
        token = self.peek()
        if self.current < len(self.tokens) - 1:
            self.current += 1
        return token

    def at_end(self):
        return self.peek().kind is TokenKind.END

    def error(self, msg, token=None, exprs=None):
        """Builds a SyntacticError pointing at token (the current token by default)."""
        token = self.peek() if token is None else token
        source = self.lines[token.line - 1] if 0 < token.line <= len(self.lines) else ""
        end = token.column + max(len(token.text), 1)
        return SyntacticError(msg, exprs, start=token.column, end=end, line=token.line, source=source)

    def unexpected(self, token=None):
        token = self.peek() if token is None else token
        if token.kind is TokenKind.END:
            return self.error("unexpected end of input", token)
        return self.error("unexpected token '{}'", token, token.describe())

    def expect(self, kind, what):
        """Consumes a token of the given kind or raises 'expected <what>'."""
        if self.peek().kind is not kind:
            raise self.error(f"expected {what}, got '{{}}'", exprs=self.peek().describe())
        return self.advance()

    def expect_colon(self, construct):
        if not self.peek().is_op(":"):
            raise self.error(f"expected ':' after {construct}")
        self.advance()

    def program(self):
        """Parses every remaining top-level statement."""
        return [node for _, node in self.statements()]

    def statements(self):
        """Parses every remaining top-level statement, returning a list of (line of its first token, node). Statements
        must be separated by newlines (a block's closing DEDENT also ends its statement).
        """
        statements = []
        while True:
            while self.peek().kind is TokenKind.NEWLINE:
                self.advance()
            if self.at_end():
                return statements

            line = self.peek().line
            statements.append((line, self.parse()))
            closed = self.current > 0 and self.tokens[self.current - 1].kind is TokenKind.DEDENT
            if not closed and self.peek().kind not in (TokenKind.NEWLINE, TokenKind.END):
                raise self.unexpected()

    def parse(self):
        """Parses one statement and returns its AST root."""
        token = self.peek()
        if token.is_keyword("if"):
            return self.parse_if()
        if token.is_keyword("while"):
            return self.parse_while()
        if token.is_keyword("break"):
            self.advance()
            return Break()
        if token.is_keyword("continue"):
            self.advance()
            return Continue()
        return self.parse_assignment()

    def parse_block(self):
        """Parses NEWLINE INDENT statements DEDENT and returns the statements as a tuple."""
        self.expect(TokenKind.NEWLINE, "newline")
        self.expect(TokenKind.INDENT, "indented block")

        statements = []
        while self.peek().kind not in (TokenKind.DEDENT, TokenKind.END):
            statements.append(self.parse())
            if self.peek().kind is TokenKind.NEWLINE:
                self.advance()

        self.expect(TokenKind.DEDENT, "dedent after block")
        return tuple(statements)

    def parse_else(self):
        """Parses an optional 'else: <block>' clause."""
        if not self.peek().is_keyword("else"):
            return None
        self.advance()
        self.expect_colon("else")
        return self.parse_block()

    def parse_if(self):
        self.advance()
        condition = self.parse_assignment()
        self.expect_colon("if condition")
        body = self.parse_block()

        elifs = []
        while self.peek().is_keyword("elif"):
            self.advance()
            elif_condition = self.parse_assignment()
            self.expect_colon("elif condition")
            elifs.append((elif_condition, self.parse_block()))

        return If(condition, body, tuple(elifs), self.parse_else())

    def parse_while(self):
        self.advance()
        condition = self.parse_assignment()
        self.expect_colon("while condition")
        body = self.parse_block()
        return While(condition, body, self.parse_else())

    def parse_assignment(self):
        left = self.parse_comparison()
        if self.peek().is_op("="):
            token = self.advance()
            right = self.parse_assignment()
            if not isinstance(left, Variable):
                raise self.error("invalid assignment target '{}'", token, str(left))
            return Assignment(left.name, right)
        return left

    def parse_comparison(self):
        left = self.parse_sum()
        symbols, rights = [], []
        while self.peek().is_op(*COMPARISONS):
            symbols.append(self.advance().text)
            rights.append(self.parse_sum())

        if not symbols:
            return left
        return Compare(left, tuple(symbols), tuple(rights))

    def parse_sum(self):
        left = self.parse_term()
        while self.peek().is_op(*ADDITIVE):
            symbol = self.advance().text
            left = BinaryOp(left, symbol, self.parse_term())
        return left

    def parse_term(self):
        left = self.parse_unary()
        while self.peek().is_op(*MULTIPLICATIVE):
            symbol = self.advance().text
            left = BinaryOp(left, symbol, self.parse_unary())
        return left

    def parse_unary(self):
        if self.peek().is_op("-"):
            self.advance()
            return BinaryOp(Literal(Value.of_int(0)), "-", self.parse_unary())
        return self.parse_power()

    def parse_power(self):
        left = self.parse_primary()
        if self.peek().is_op(POWER):
            symbol = self.advance().text
            left = BinaryOp(left, symbol, self.parse_unary())
        return left

    def parse_primary(self):
        token = self.peek()
        if token.kind is TokenKind.NUMBER:
            return self.parse_number()
        if token.kind is TokenKind.STRING:
            self.advance()
            return Literal(Value.of_string(token.text))
        if token.kind is TokenKind.BOOLEAN:
            self.advance()
            return Literal(Value.of_bool(token.text == "True"))
        if token.kind is TokenKind.IDENTIFIER:
            self.advance()
            return Variable(token.text)
        if token.is_op("("):
            return self.parse_parenthesized()
        raise self.unexpected(token)

    def parse_number(self):
        token = self.advance()
        dots = token.text.count(".")
        if dots == 0:
            if len(token.text) > MAX_INT_DIGITS:
                raise self.error(f"integer literal has more than {MAX_INT_DIGITS} digits", token)
            return Literal(Value.of_int(token.text))
        if dots == 1:
            return Literal(Value.of_float(token.text))
        raise self.error("invalid number format '{}'", token, token.text)

    def parse_parenthesized(self):
        self.advance()
        expr = self.parse_assignment()
        if not self.peek().is_op(")"):
            raise self.error("expected ')'")
        self.advance()
        return expr


def parse(tokens, source=""):
    """Parses every statement in tokens. Shortcut for Parser(tokens, source).program()."""
    return Parser(tokens, source).program()
