"""Lexer, parser, AST, evaluator, session and shell of the minipy language."""
