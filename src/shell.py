""" Drive a session over already-parsed command trees. """
from constants import SHELL_EXIT
from exceptions import ShellExit
from executor import execute_tree
from shell_state import ShellState


class Shell:
    def __init__(self, state: ShellState|None = None):
        self.state = state if state is not None else ShellState()

    def execute(self, tree) -> int:
        """ Run one tree; raises ShellExit when it ends the session. """
        status = execute_tree(tree, self.state)
        if status == SHELL_EXIT:
            raise ShellExit(self.state.last_status)
        self.state.set_status(status)
        return status

    def run(self, trees) -> int:
        """ Run trees in order until they run out or one ends the session. """
        for tree in trees:
            try:
                self.execute(tree)
            except ShellExit as e:
                return e.status
        return self.state.last_status
