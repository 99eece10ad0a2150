import unittest

from minipy.lang.error import SyntacticError
from minipy.lang.lexical import Lexer, tokenize
from minipy.lang.tokens import Token, TokenKind


def kinds(source):
    return [token.kind for token in tokenize(source)]


def texts(source):
    """Texts of the non-structural tokens in source."""
    structural = (TokenKind.NEWLINE, TokenKind.INDENT, TokenKind.DEDENT, TokenKind.END)
    return [token.text for token in tokenize(source) if token.kind not in structural]


class LexerTestCase(unittest.TestCase):

    def test_simple_statement(self):
        self.assertEqual([
            Token(TokenKind.IDENTIFIER, "x", 1, 0),
            Token(TokenKind.OPERATOR, "=", 1, 2),
            Token(TokenKind.NUMBER, "5", 1, 4),
            Token(TokenKind.NEWLINE, "", 1, 5),
            Token(TokenKind.END, "", 1, 5),
        ], tokenize("x = 5"))

    def test_empty(self):
        should_be_empty = ["", "   ", "\n\n", "# only a comment", "  # indented comment\n"]
        for case in should_be_empty:
            self.assertEqual([TokenKind.END], kinds(case), repr(case))

    def test_classification(self):
        cases = {
            "True": TokenKind.BOOLEAN,
            "False": TokenKind.BOOLEAN,
            "true": TokenKind.IDENTIFIER,
            "def": TokenKind.KEYWORD,
            "elif": TokenKind.KEYWORD,
            "continue": TokenKind.KEYWORD,
            "_private": TokenKind.IDENTIFIER,
            "foo_1": TokenKind.IDENTIFIER,
            "42": TokenKind.NUMBER,
            "'s'": TokenKind.STRING,
            "+": TokenKind.OPERATOR,
        }
        for case, kind in cases.items():
            self.assertEqual(kind, tokenize(case)[0].kind, case)

    def test_operators(self):
        cases = {
            "a ** b // c": ["a", "**", "b", "//", "c"],
            "a == b != c": ["a", "==", "b", "!=", "c"],
            "a <= b >= c < d > e": ["a", "<=", "b", ">=", "c", "<", "d", ">", "e"],
            "a += 1": ["a", "+=", "1"],
            "a -= 1": ["a", "-=", "1"],
            "a=-1": ["a", "=", "-", "1"],
            "(a)%b": ["(", "a", ")", "%", "b"],
            "a***b": ["a", "**", "*", "b"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, texts(case), case)

    def test_numbers(self):
        cases = {"3.14": ["3.14"], "1.2.3": ["1.2.3"], "10.": ["10."], "007": ["007"]}
        for case, expected in cases.items():
            self.assertEqual(expected, texts(case), case)

    def test_strings(self):
        self.assertEqual(["hello world"], texts('"hello world"'))
        self.assertEqual(['say "hi"'], texts("'say \"hi\"'"))
        self.assertEqual(["# not a comment"], texts("'# not a comment'"))

        tokens = tokenize('x = "a\nb"\ny')
        self.assertEqual(Token(TokenKind.STRING, "a\nb", 1, 4), tokens[2])
        self.assertEqual(3, tokens[4].line)  # y

        should_raise = ["'abc", '"abc\'', "x = 'a\nb"]
        for case in should_raise:
            self.assertRaises(SyntacticError, tokenize, case)

    def test_comments(self):
        self.assertEqual(["x"], texts("x # comment"))
        self.assertEqual([TokenKind.IDENTIFIER, TokenKind.NEWLINE, TokenKind.END], kinds("x # comment"))

    def test_line_numbers(self):
        tokens = tokenize("a\n\n# comment\nb")
        self.assertEqual(1, tokens[0].line)
        self.assertEqual(4, tokens[2].line)

    def test_indentation(self):
        self.assertEqual([
            TokenKind.KEYWORD, TokenKind.IDENTIFIER, TokenKind.OPERATOR, TokenKind.NEWLINE,
            TokenKind.INDENT, TokenKind.IDENTIFIER, TokenKind.OPERATOR, TokenKind.NUMBER, TokenKind.NEWLINE,
            TokenKind.DEDENT, TokenKind.IDENTIFIER, TokenKind.NEWLINE,
            TokenKind.END,
        ], kinds("if a:\n    b = 1\nc"))

    def test_pending_dedents_are_flushed(self):
        source = "while a:\n    if b:\n        break\n"
        self.assertEqual(2, kinds(source).count(TokenKind.INDENT))
        self.assertEqual(2, kinds(source).count(TokenKind.DEDENT))
        self.assertEqual([TokenKind.DEDENT, TokenKind.DEDENT, TokenKind.END], kinds(source)[-3:])

    def test_blank_and_comment_lines_keep_indentation(self):
        source = "while a:\n\n    # note\n  # shallow note\n    b\n"
        self.assertEqual([
            TokenKind.KEYWORD, TokenKind.IDENTIFIER, TokenKind.OPERATOR, TokenKind.NEWLINE,
            TokenKind.INDENT, TokenKind.IDENTIFIER, TokenKind.NEWLINE,
            TokenKind.DEDENT, TokenKind.END,
        ], kinds(source))

    def test_multiple_dedents(self):
        source = "if a:\n    if b:\n        c\nd"
        self.assertEqual([TokenKind.DEDENT, TokenKind.DEDENT, TokenKind.IDENTIFIER], kinds(source)[-5:-2])

    def test_mismatched_dedent(self):
        should_raise = ["if a:\n        b\n    c", "if a:\n    b\n  c"]
        for case in should_raise:
            self.assertRaises(SyntacticError, tokenize, case)

    def test_error_location(self):
        try:
            tokenize("x = 1\ny = 'oops")
        except SyntacticError as error:
            self.assertEqual(2, error.line)
            self.assertEqual(4, error.start)
            self.assertEqual("y = 'oops", error.expr)
        else:
            self.fail("unterminated string not reported")

    def test_restart(self):
        lexer = Lexer()
        first = lexer.tokenize("if a:\n    b")
        self.assertEqual(first, lexer.tokenize("if a:\n    b"))
        self.assertEqual([TokenKind.IDENTIFIER, TokenKind.NEWLINE, TokenKind.END], [t.kind for t in lexer.tokenize("c")])


if __name__ == '__main__':
    unittest.main()
