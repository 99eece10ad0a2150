"""Handles interactive/command-line mode for the minipy interpreter. Uses cmd as backend."""

import cmd

from minipy.lang.nodes import Assignment, If, While
from minipy.lang.session import Session

EXIT_COMMANDS = ("exit", "quit", "q", "Q")
SILENT_NODES = (Assignment, If, While)  # statements whose value is never echoed


def echoes(result):
    """Whether or not result should be printed: it must have a value and not come from an assignment/if/while."""
    return result.value is not None and not isinstance(result.node, SILENT_NODES)


class Shell(cmd.Cmd):
    """minipy interpreter shell."""
    intro = "minipy :: minimal Python-like interpreter\nType 'help' for more information, 'exit' to leave."
    prompt = ">>> "
    secondary_prompt = "... "  # used for line continuations
    _tmp_prompt = ">>> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._lines = []  # buffered lines of an unfinished block
        self._block_start = 0
        self.line_num = 0

    def cmdloop(self, intro=None):
        """Reads lines until a command asks to stop. Only a real end of input (EOFError) calls do_EOF, so a typed 'EOF'
        is ordinary code.
        """
        print(self.intro if intro is None else intro)

        stop = None
        while not stop:
            try:
                line = input(self.prompt)
            except EOFError:
                stop = self.do_EOF("")
            else:
                stop = self.onecmd(line)

    def onecmd(self, line):
        """Everything that isn't an exit/help command is code, including lines that start with a command name
        ('q = 1' assigns q).
        """
        command = line.strip()
        if not self._lines:
            if command in EXIT_COMMANDS:
                return self.do_exit("")
            if command in ("help", "?"):
                return self.do_help("")
        return self.default(line)

    def default(self, line):
        """Executes arbitrary minipy code. Block headers start a continuation that ends at the first blank line."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1

            if self._lines:
                if line.strip():
                    self._lines.append(line)
                    return
                self.flush()

            elif not line.strip():
                return  # empty input at the primary prompt is ignored

            elif Session.opens_block(line):
                self._lines = [line]
                self._block_start = self.line_num
                self.prompt = self.secondary_prompt

            else:
                self.execute(line, self.line_num)

    def flush(self):
        """Runs the buffered block and goes back to the primary prompt."""
        source, self._lines = "\n".join(self._lines), []
        self.prompt = self._tmp_prompt
        self.execute(source, self._block_start)

    def execute(self, source, line_num):
        try:
            self.sess.add(source, line_num)
            self.sess.run()
        finally:
            while self.sess.results:
                result = self.sess.pop()
                if echoes(result):
                    print(result)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the minipy interpreter!\n\n"
              "minipy is a small, indentation-sensitive, Python-like language with integers, \n"
              "floats, booleans and strings, arithmetic and chained comparisons, variables, \n"
              "if/elif/else and while/else loops with break and continue.\n\n"
              "Try it out by typing 'x = 2 ** 10', then 'x // 3'. A line ending in ':' starts \n"
              "a block: indent its body and finish it with an empty line.\n\n"
              "Type 'exit', 'quit', 'q' or 'Q' to leave.")

    def do_EOF(self, arg):
        """Exits interpreter, running any unfinished block first."""
        print()
        if self._lines:
            with self.sess.error_handler:
                self.flush()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
