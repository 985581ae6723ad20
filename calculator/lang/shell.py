"""Handles interactive/command-line mode for the calculator. Uses cmd as backend."""

import cmd

from calculator.lang.error import GenericException
from calculator.pure.lexical import Lexer


class Shell(cmd.Cmd):
    """Integer calculator shell."""
    intro = ("Welcome to the Calculator REPL!\n"
             "type <expression> to evaluate an expression\n"
             "type 'vars' to list variables\n"
             "type 'clear' to clear variables\n"
             "type 'exit' to exit\n")
    prompt = ">>> "
    result_prefix = "=> "
    goodbye = "Goodbye!"

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

    def cmdloop(self, intro=None):
        """Runs the loop until exit. Ctrl-C at the prompt is reported and the loop starts again, without the intro."""
        while True:
            try:
                return super().cmdloop(intro)
            except KeyboardInterrupt:
                print()
                self.sess.error_handler.throw(GenericException("keyboard interrupt"))
                intro = ""

    def parseline(self, line):
        """Unlike cmd.Cmd, '?' is not an alias for help: the line is passed on unchanged and reported like any other
        unrecognized character.
        """
        line = line.strip()
        if line.startswith("?"):
            return None, None, line
        return super().parseline(line)

    def default(self, line):
        """Evaluates an arbitrary statement and prints its value."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            value = self.sess.execute(line)
            print(f"{self.result_prefix}{value}")

    def _as_statement(self, arg):
        """Meta-commands are only recognized alone on their line: 'vars = 3' is an assignment to vars. Returns whether
        or not the current line was handled as a statement.
        """
        if arg:
            self.default(self.lastcmd)
            return True
        return False

    def do_vars(self, arg):
        """Lists variables."""
        if not self._as_statement(arg):
            for name, value in self.sess.list_variables():
                print(f"{name} = {value}")

    def do_clear(self, arg):
        """Clears all variables."""
        if not self._as_statement(arg):
            self.sess.clear_variables()

    def do_del(self, arg):
        """Deletes the variables named in arg."""
        names = arg.split()
        if not names or not all(Lexer.is_letter(char) for name in names for char in name):
            self.default(self.lastcmd)  # 'del', 'del = 3', 'del * 2' are ordinary statements
            return

        with self.sess.error_handler:
            names = list(dict.fromkeys(names))
            for name in names:
                self.sess.lookup(name)  # raises UndefinedVariable before anything is removed
            for name in names:
                self.sess.remove_variable(name)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if self._as_statement(arg):
            return
        print("Welcome to the calculator!\n\n"
              "Statements are integer arithmetic expressions using + - * / % and parentheses, \n"
              "or assignments of an expression to a variable. Division and modulo truncate \n"
              "toward zero. Variables that were never assigned read as 0.\n\n"
              "Try it out by typing 'x = 2 * 3'. This will bind 6 to the name 'x'. Next, try \n"
              "typing 'x % 4', giving 2 as the result. 'vars' lists variables, 'del x' \n"
              "deletes one and 'clear' deletes all of them.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        if self._as_statement(arg):
            return False
        print()
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter."""
        if self._as_statement(arg):
            return False
        print(self.goodbye)
        return True
