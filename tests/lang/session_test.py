import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from minipy.lang.error import (ControlFlowError, DivisionByZeroError, ErrorHandler, GenericException, SemanticError,
                               SyntacticError, UndefinedVariableError, UnsupportedOperationError)
from minipy.lang.nodes import Assignment, BinaryOp
from minipy.lang.session import Session
from minipy.lang.shell import echoes
from minipy.lang.values import Value


def new_session():
    return Session(ErrorHandler(fatal=False), Session.SH_FILE, cmd_line=True)


class SessionTestCase(unittest.TestCase):

    def test_results(self):
        sess = new_session()
        sess.add("a = 1\na + 1\nif a:\n    5\n")
        sess.run()

        self.assertEqual(3, len(sess.results))
        self.assertIsInstance(sess.results[0].node, Assignment)
        self.assertEqual(Value.of_int(1), sess.results[0].value)

        echoed = [str(result) for result in sess.results if echoes(result)]
        self.assertEqual(["2"], echoed)

        self.assertIsInstance(sess.pop().node, Assignment)
        self.assertIsInstance(sess.pop().node, BinaryOp)
        self.assertEqual(1, len(sess.results))

    def test_environment_persists(self):
        sess = new_session()
        sess.evaluate("x = 2")
        sess.evaluate("y = x ** 10")
        self.assertEqual("1024", str(sess.evaluate("y")))
        self.assertIsNone(sess.evaluate("\n# nothing here\n"))

    def test_error_abandons_queue(self):
        sess = new_session()
        sess.add("a = 1\nb = a / 0\nc = 3")
        self.assertRaises(DivisionByZeroError, sess.run)

        self.assertEqual([], sess.to_exec)
        self.assertEqual(1, len(sess.results))
        self.assertRaises(UndefinedVariableError, sess.evaluate, "b")
        self.assertRaises(UndefinedVariableError, sess.evaluate, "c")

    def test_failed_assignment(self):
        sess = new_session()
        self.assertRaises(DivisionByZeroError, sess.evaluate, "x = 5 / 0")
        self.assertRaises(UndefinedVariableError, sess.evaluate, "x")

    def test_syntax_error_queues_nothing(self):
        sess = new_session()
        self.assertRaises(SyntacticError, sess.add, "a = 1\n1 +")
        self.assertEqual([], sess.to_exec)
        self.assertRaises(UndefinedVariableError, sess.evaluate, "a")

    def test_runtime_error_location(self):
        sess = new_session()
        with self.assertRaises(UnsupportedOperationError) as context:
            sess.evaluate("1 + 'a'")
        self.assertEqual("(1 + 'a')", context.exception.expr)
        self.assertEqual(0, context.exception.start)
        self.assertEqual(len("(1 + 'a')"), context.exception.end)

    def test_runtime_error_line(self):
        sess = new_session()
        sess.add("x = 1\ny = 2\n\nz = undefined_name\nw = 4")
        with self.assertRaises(UndefinedVariableError) as context:
            sess.run()
        self.assertEqual(4, context.exception.line)

        with self.assertRaises(ControlFlowError) as context:
            sess.evaluate("x = 1\nif x:\n    1\n    break")
        self.assertEqual(2, context.exception.line)

    def test_opens_block(self):
        should_open = ["if x:", "while a < 3:  # loop", "else:", "elif x == 1:"]
        for case in should_open:
            self.assertTrue(Session.opens_block(case), case)

        should_not_open = ["x = 1", "'unterminated", "x = ':'", "", "# if x:"]
        for case in should_not_open:
            self.assertFalse(Session.opens_block(case), case)

    def test_file_mode(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.py")
            with open(path, "w") as file:
                file.write("x = 2\nwhile x < 100:\n    x = x * x\nx\n")

            handler = ErrorHandler()
            sess = Session(handler, path, cmd_line=False)
            self.assertTrue(handler.fatal)
            sess.run()
            self.assertEqual("256", str(sess.results[-1]))

    def test_file_error_line(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "prog.py")
            with open(path, "w") as file:
                file.write("x = 1\ny = 2\nz = 3\nq = undefined_name\n")

            out = io.StringIO()
            with redirect_stdout(out), self.assertRaises(SystemExit):
                with ErrorHandler() as handler:
                    Session(handler, path, cmd_line=False).run()

        self.assertIn("line 4:", out.getvalue())
        self.assertIn("undefined variable", out.getvalue())

    def test_bad_paths(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, False)

        with tempfile.TemporaryDirectory() as tmp:
            missing = os.path.join(tmp, "missing.py")
            self.assertRaises(GenericException, Session, ErrorHandler(), missing, False)


class ErrorHandlerTestCase(unittest.TestCase):

    def test_non_fatal(self):
        sess = new_session()
        out = io.StringIO()
        with redirect_stdout(out):
            with sess.error_handler:
                sess.evaluate("x = (1 +")
        self.assertIn("syntax error", out.getvalue())
        self.assertIn("line 1", out.getvalue())
        self.assertEqual((None, None), sess.error_handler.traceback[Session.SH_FILE])

    def test_runtime_category(self):
        sess = new_session()
        out = io.StringIO()
        with redirect_stdout(out):
            with sess.error_handler:
                sess.evaluate("undefined_name")
        self.assertIn("runtime error", out.getvalue())
        self.assertIn("undefined variable", out.getvalue())

    def test_fatal(self):
        handler = ErrorHandler()
        with redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                with handler:
                    raise SemanticError("boom")
        self.assertEqual(1, context.exception.code)

    def test_line_offset(self):
        handler = ErrorHandler()
        handler.register_file("prog.py")
        handler.register_line("prog.py", "a = 1\nb = (", 5)

        error = SyntacticError("expected ')'", line=2, source="b = (", start=4, end=5)
        self.assertIn("File 'prog.py', line 6", handler.format(error))

    def test_diagnose(self):
        error = SyntacticError("unexpected token", source="x = = 1", start=4, end=5)
        lines = ErrorHandler.diagnose(error).split("\n")
        self.assertEqual(2, len(lines))
        self.assertIn("^", lines[1])
        self.assertTrue(lines[1].startswith("  " + " " * 4))

    def test_internal(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(ValueError):
                with ErrorHandler(fatal=False):
                    raise ValueError("bug")
        self.assertIn("[internal]", out.getvalue())
        self.assertIn("ValueError", out.getvalue())

    def test_internal_message_with_braces(self):
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(KeyError):
                with ErrorHandler(fatal=False):
                    raise KeyError("{missing}")
        self.assertIn("{missing}", out.getvalue())


if __name__ == '__main__':
    unittest.main()
