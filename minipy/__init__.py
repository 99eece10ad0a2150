"""minipy: a minimal, indentation-sensitive, Python-like scripting language.

Basic program flow:
    1. Lexer: turns a line (or an assembled block) of source into tokens, with INDENT/DEDENT markers
        - see minipy/lang/lexical.py
    2. Parser: builds one AST per statement with a precedence-climbing grammar
        - see minipy/lang/parser.py for the grammar rules
    3. Evaluation: walks each AST against the session's Environment, no bytecode involved
        - see minipy/lang/nodes.py and minipy/lang/operators.py
"""

__version__ = "0.1.0"
