"""Session control for the calculator. A Session owns the Evaluator (and with it, the variable environment) for as long
as the interpreter runs, and registers every line it executes with the ErrorHandler so errors can point back at it.
"""

from calculator.pure.evaluator import Evaluator
from calculator.pure.parser import Parser


class Session:
    """Governs a calculator session, with control over the variables defined in it."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, warn_undefined=False):
        self.error_handler = error_handler
        self.error_handler.register_file(Session.SH_FILE)
        self.error_handler.fatal = False  # a bad line must not end the session

        self.warn_undefined = warn_undefined  # whether or not to warn when a variable is materialized at 0
        self.evaluator = Evaluator()
        self.line_num = 0

    @staticmethod
    def parse_statement(line):
        """Parses line into a Statement. Raises a LexicalError or ParseError if line is not a valid statement."""
        return Parser(line).parse_statement()

    def evaluate_statement(self, stmt):
        """Evaluates stmt in this session's environment and returns its value. Raises an EvalError on failure, in
        which case the environment is unchanged.
        """
        value = self.evaluator.evaluate_statement(stmt)

        if self.warn_undefined:
            for node in self.evaluator.materialized:
                msg = "'{1}' is not defined, defaulting to 0"
                self.error_handler.warn(msg, (stmt.source, node.name), start=node.start, end=node.end)

        return value

    def execute(self, line):
        """Parses and evaluates line, registering it in the traceback while it runs. Errors are raised to the caller,
        which should be inside the ErrorHandler context.
        """
        self.line_num += 1
        self.error_handler.register_line(Session.SH_FILE, line, self.line_num)  # in case error is raised

        value = self.evaluate_statement(self.parse_statement(line))

        self.error_handler.remove_line(Session.SH_FILE)  # error was not raised
        return value

    def lookup(self, name):
        return self.evaluator.lookup(name)

    def remove_variable(self, name):
        self.evaluator.remove(name)

    def list_variables(self):
        return self.evaluator.list_variables()

    def clear_variables(self):
        self.evaluator.clear_variables()
