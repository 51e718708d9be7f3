"""Interactive read-eval-print loop for the cat language. Uses cmd as backend."""

import cmd
import contextlib
import logging
import os

from termcolor import colored

from .lexer import Lexer
from .parser import Parser
from .ast import LetStatement
from .runtime import Environment, Interpreter, Error, error_val, get_builtin_registry

logger = logging.getLogger(__name__)

PROMPT = ">> "

CAT_LOGO = r"""
   ____      _
  / ___|__ _| |_
 | |   / _` | __|
 | |__| (_| | |_
  \____\__,_|\__|
"""


class Shell(cmd.Cmd):
    """cat interpreter shell.

    Every line is parsed and evaluated in one environment shared by the
    whole session, so bindings and closures persist from line to line.
    """
    intro = CAT_LOGO + "\nType 'help' for more information, 'exit' to leave."
    ERROR = "red"

    def __init__(self, environment=None, color=True, stdin=None, stdout=None):
        super().__init__(stdin=stdin, stdout=stdout)
        # readline only makes sense on a real terminal
        self.use_rawinput = stdin is None

        self.prompt = os.environ.get("CAT_PROMPT", PROMPT)
        self.environment = environment if environment is not None else Environment(name="repl")
        self.color = color
        self.interpreter = Interpreter()

    def _write(self, text, color=None):
        if color and self.color:
            text = colored(text, color)
        self.stdout.write(text + "\n")

    def print_parser_errors(self, errors):
        """Print syntax errors under the logo, one per tab-indented line."""
        self._write(CAT_LOGO, self.ERROR)
        self._write("parser errors:", self.ERROR)
        for msg in errors:
            self._write("\t" + msg, self.ERROR)

    def onecmd(self, line):
        """Treat only bare 'help', 'help NAME' and 'exit' as commands; the rest is cat source."""
        words = line.split()
        if words == ["exit"] or words == ["EOF"] or (words[:1] == ["help"] and len(words) <= 2):
            return super().onecmd(line)
        if not words:
            return self.emptyline()
        return self.default(line)

    def default(self, line):
        """Parses and evaluates one line of cat source."""
        parser = Parser(Lexer(line))
        program = parser.parse_program()
        if parser.errors:
            self.print_parser_errors(parser.errors)
            return

        # puts writes through print(); send it to this shell's stream
        with contextlib.redirect_stdout(self.stdout):
            try:
                result = self.interpreter.evaluate(program, self.environment)
            except RecursionError:
                result = error_val("maximum recursion depth exceeded")
        logger.debug("evaluated %r -> %s", line, result.type.value)

        if isinstance(result, Error):
            self._write(result.inspect(), self.ERROR)
        elif program.statements and isinstance(program.statements[-1], LetStatement):
            return  # bindings print nothing
        else:
            self._write(result.inspect())

    def do_help(self, arg):
        """Short intro, or the description of one built-in function."""
        registry = get_builtin_registry()
        if arg:
            builtin = registry.get_function(arg)
            if builtin is None:
                self._write(f"no built-in function named '{arg}'", self.ERROR)
            else:
                self._write(f"{builtin.name}: {builtin.doc}")
            return

        self._write("cat is a small dynamically-typed scripting language.\n\n"
                    "Try 'let add = fn(a, b) { a + b };' and then 'add(1, 2)'.\n"
                    "Type 'exit' or press Ctrl-D to leave.\n\n"
                    "Built-in functions:")
        for name in registry.names():
            self._write(f"  {name:<6} {registry.get_function(name).doc}")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
