"""Error handling for the calculator language. Only GenericExceptions should be encountered during running: if another
type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Hierarchy:
    GenericException
     ├── LexicalError          ; unrecognized character
     ├── ParseError            ; malformed statement
     └── EvalError
          ├── DivisionByZero   ; `/` or `%` with a zero right operand
          └── UndefinedVariable  ; direct lookup of a name that was never assigned or read
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a calculator error/warning.

    msg is a str.format template. exprs[0] should be the source line that caused the error: start and end are the
    columns of the offending part of that line. The remaining exprs are snippets referenced by the template.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


class LexicalError(GenericException):
    """Raised by the Lexer when it meets a character that starts no token."""


class ParseError(GenericException):
    """Raised by the Parser when a line is not a valid statement."""


class EvalError(GenericException):
    """Superclass for errors raised while evaluating a well-formed statement."""


class DivisionByZero(EvalError):
    """Raised when the right operand of `/` or `%` evaluates to 0."""


class UndefinedVariable(EvalError):
    """Raised by direct variable queries for names absent from the environment. Never raised by evaluation of an
    expression, which materializes unknown names at 0 instead.
    """


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom calculator errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to evaluating a line."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a line was evaluated successfully."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        file, (line, line_num) = next(iter(self.traceback.items()))
        if line and error.expr in line:
            col = line.index(error.expr) + error.start
            error_msg = colored(f"{file}:{line_num}:{col}: ", attrs=["bold"])
        else:
            error_msg = colored(f"{file}: ", attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        frames = [(file, line, line_num) for file, (line, line_num) in self.traceback.items() if line]
        if len(frames) > 1:  # a single line is already shown by the diagnosis
            error_msg = "Traceback:\n"
            for file, line, line_num in frames:  # assumes dict is insertion-ordered
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

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
        if exc_type is None:
            return False
        elif issubclass(exc_type, KeyboardInterrupt):
            print()
            self.throw(GenericException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            description = f"{exc_type.__name__}: {exc_val}".replace("{", "{{").replace("}", "}}")
            self.throw(GenericException(f"unknown error: '{description}'", internal=True))

        return not do_exit
