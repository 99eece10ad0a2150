"""Error handling for the minipy language. Only GenericExceptions should be encountered during running: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

GenericExceptions come in two flavours: SyntacticErrors are raised while tokenizing or parsing, SemanticErrors while
evaluating. Neither is recovered from inside a statement.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a minipy error. exprs are substituted into the '{}'
    placeholders of msg (bolded). expr is the source line that caused the error, used for the caret diagnosis.
    """
    category = "error"

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, line=None, source=None):
        if exprs is None:
            exprs = ()
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(str(expr), attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = source if source is not None else ""  # offending source line, if known
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.line = line
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)

    def locate(self, source, line, start=0, end=None):
        """Attaches the offending source line (and column span) to this error if it was raised without one."""
        if not self.expr and source:
            self.expr = source
            self.line = line
            self.start = min(start, len(source))
            self.end = end if end is not None else len(source)
        return self


class SyntacticError(GenericException):
    """Malformed number, unterminated string, unexpected or missing token, invalid assignment target."""
    category = "syntax error"


class SemanticError(GenericException):
    """Raised during evaluation."""
    category = "runtime error"


class UndefinedVariableError(SemanticError):
    pass


class DivisionByZeroError(SemanticError):
    pass


class UnsupportedOperationError(SemanticError):
    pass


class ControlFlowError(SemanticError):
    """break/continue that escaped every enclosing loop."""


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom minipy errors."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def format(self, error):
        """Builds the full message for error: traceback lines, category and message."""
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # assumes dict is insertion-ordered
            if line:
                if error.line is not None:
                    line_num += error.line - 1  # error.line is relative to the registered chunk
                error_msg += f"  File '{file}', line {line_num}:\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored(f"{error.category}: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        return error_msg

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        print(self.format(error))

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
