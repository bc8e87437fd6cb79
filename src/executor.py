""" Evaluate an operator tree and compose exit statuses. """
from command import CommandNode, Operator
from constants import EXIT_COMMANDS, SHELL_EXIT
from process import run_in_parallel, run_on_pipe
from runner import execute_command
from shell_state import ShellState


def execute_tree(tree: CommandNode|None, state: ShellState) -> int:
    """
    Run a command tree and return its status, or SHELL_EXIT if the
    session should end.

    Holds no state of its own, so forked children re-enter it directly
    for the branches of `&` and `|`. SHELL_EXIT from either side of
    `;`, `&&` or `||` stops evaluation and is returned as-is.
    """
    if tree is None:
        return SHELL_EXIT

    if tree.op is Operator.NONE:
        if tree.command is None:
            return SHELL_EXIT
        if state.evaluate(tree.command.verb) in EXIT_COMMANDS:
            return SHELL_EXIT
        return execute_command(tree.command, state)

    if tree.op is Operator.SEQUENTIAL:
        first = execute_tree(tree.left, state)
        if first == SHELL_EXIT:
            return first
        second = execute_tree(tree.right, state)
        if second == SHELL_EXIT:
            return second
        return first | second

    if tree.op is Operator.CONDITIONAL_ZERO:
        status = execute_tree(tree.left, state)
        if status != 0:
            return status
        return execute_tree(tree.right, state)

    if tree.op is Operator.CONDITIONAL_NZERO:
        status = execute_tree(tree.left, state)
        if status == 0 or status == SHELL_EXIT:
            return status
        return execute_tree(tree.right, state)

    if tree.op is Operator.PARALLEL:
        return run_in_parallel(tree.left, tree.right, state, execute_tree)

    if tree.op is Operator.PIPE:
        return run_on_pipe(tree.left, tree.right, state, execute_tree)

    return SHELL_EXIT
