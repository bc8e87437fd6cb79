""" Current state of the shell. """
import os

from command import Substitution, Word


class ShellState:
    """
    Process-wide state the executor reads and mutates: the environment
    table and the working directory. Both live in the OS process, so a
    forked child starts from a copy and its changes never reach the parent.
    """
    def __init__(self, environ=None):
        self.environ = os.environ if environ is None else environ
        self.last_status = 0

    def set_var(self, name, value):
        self.environ[name] = value

    def get_var(self, name):
        return self.environ.get(name, "")

    def set_status(self, status: int):
        self.last_status = int(status) if status is not None else 0

    def chdir(self, path):
        os.chdir(path)

    def getcwd(self) -> str:
        return os.getcwd()

    def evaluate(self, word: Word|None) -> str:
        """ Concatenate the fragments of a word; unset variables expand to "". """
        if word is None:
            return ""

        result = ""
        for part in word.parts:
            if isinstance(part, Substitution):
                result += self.get_var(part.name)
            else:
                result += part.text
        return result
