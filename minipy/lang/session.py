"""Session control for the minipy language: one Environment, a queue of parsed statements and the results of running
them. Used both in command-line mode (statements arrive one assembled block at a time) and file mode.
"""

from dataclasses import dataclass
from typing import Optional

from minipy.lang.environment import Environment
from minipy.lang.error import ControlFlowError, GenericException
from minipy.lang.lexical import Lexer
from minipy.lang.nodes import Expression, Node, Signal
from minipy.lang.parser import Parser
from minipy.lang.tokens import TokenKind
from minipy.lang.values import Value


@dataclass
class Result:
    """Root node of a top-level statement and the value it produced (None for no value)."""
    node: Node
    value: Optional[Value]

    def __str__(self):
        return "" if self.value is None else self.value.render()


class Session:
    """Governs a minipy session: owns the variable environment for its whole lifetime. In command-line mode path only
    names the source in error messages; otherwise the file at path is read and queued.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()
        self.lexer = Lexer()
        self.to_exec = []  # list of (chunk line num, line in chunk, source, node) waiting to be run
        self.results = []  # list of Results, oldest first

        if self.cmd_line:
            self.error_handler.fatal = False

        else:
            if path == Session.SH_FILE:
                raise GenericException("'<in>' is a reserved filename")

            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(source, 1)

    @staticmethod
    def opens_block(line):
        """Whether or not line is the header of a compound statement (its code ends with ':'), meaning the shell should
        keep reading continuation lines.
        """
        try:
            tokens = Lexer().tokenize(line)
        except GenericException:
            return False  # let add report it

        code = [token for token in tokens if token.kind not in (TokenKind.NEWLINE, TokenKind.END)]
        return bool(code) and code[-1].is_op(":")

    def add(self, source, line_num=1):
        """Tokenizes and parses source, queueing its statements. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        tokens = self.lexer.tokenize(source)
        for line, node in Parser(tokens, source).statements():
            self.to_exec.append((line_num, line, source, node))

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs queued statements in order, appending a Result for each. The first error abandons the rest of the queue
        and is raised.
        """
        while self.to_exec:
            line_num, line, source, node = self.to_exec.pop(0)
            self.error_handler.register_line(self.path, source, line_num)

            try:
                outcome = node.execute(self.env)
                if outcome.signal is not Signal.NORMAL:
                    raise ControlFlowError("'{}' outside loop", outcome.signal.value)
            except GenericException as error:
                self.to_exec.clear()
                if isinstance(node, Expression):
                    error.locate(str(node), line)
                if error.line is None:
                    error.line = line  # first line of the failing statement
                raise

            self.results.append(Result(node, outcome.value))
            self.error_handler.remove_line(self.path)

    def evaluate(self, source, line_num=1):
        """Adds and runs source, returning the Result of its last statement (None if source has no statements)."""
        pending = len(self.results)
        self.add(source, line_num)
        self.run()
        return self.results[-1] if len(self.results) > pending else None

    def pop(self):
        """Removes and returns the oldest Result."""
        return self.results.pop(0)
