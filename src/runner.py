""" Execute a simple command. """
import os
import sys

from command import Command, Word
from constants import (
    CD_COMMAND,
    FILE_MODE,
    PWD_COMMAND,
    STATUS_FAILURE,
    STATUS_NOT_EXECUTABLE,
    STATUS_NOT_FOUND,
    STATUS_SUCCESS,
    STDERR_FILENO,
    STDIN_FILENO,
    STDOUT_FILENO,
)
from exceptions import RedirectionError
from process import spawn
from shell_state import ShellState


def build_argv(words: Word|None, verb: str, state: ShellState|None = None) -> list:
    """
    Build an argument vector: the verb, every evaluated word in order,
    then a None terminator. Its length is always len(words) + 2.
    """
    if state is None:
        state = ShellState()
    argv = [verb]
    if words is not None:
        argv.extend(state.evaluate(word) for word in words)
    argv.append(None)
    return argv


def report(message: str):
    """ Write a diagnostic straight to file descriptor 2. """
    os.write(STDERR_FILENO, os.fsencode(message + "\n"))


def open_redirect(path: str, append: bool) -> int:
    flags = os.O_WRONLY | os.O_CREAT | (os.O_APPEND if append else os.O_TRUNC)
    try:
        return os.open(path, flags, FILE_MODE)
    except (OSError, ValueError) as e:
        raise RedirectionError(path, e) from e


def move_fd(fd: int, path: str, *targets: int):
    """ Duplicate fd onto every target stream, then close the original. """
    try:
        for target in targets:
            os.dup2(fd, target)
    except OSError as e:
        raise RedirectionError(path, e) from e
    finally:
        if fd not in targets:
            os.close(fd)


def redirect_input(path: str):
    try:
        fd = os.open(path, os.O_RDONLY)
    except (OSError, ValueError) as e:
        raise RedirectionError(path, e) from e
    move_fd(fd, path, STDIN_FILENO)


def redirect_output(cmd: Command, state: ShellState):
    """ Point stdout/stderr at their targets; a shared target is opened once. """
    stdout = state.evaluate(cmd.stdout) if cmd.stdout is not None else None
    stderr = state.evaluate(cmd.stderr) if cmd.stderr is not None else None

    if stdout is not None and stdout == stderr:
        fd = open_redirect(stderr, cmd.stderr_append)
        move_fd(fd, stderr, STDOUT_FILENO, STDERR_FILENO)
        return

    if stdout is not None:
        move_fd(open_redirect(stdout, cmd.append), stdout, STDOUT_FILENO)
    if stderr is not None:
        move_fd(open_redirect(stderr, cmd.stderr_append), stderr, STDERR_FILENO)


def run_in_child(cmd: Command, state: ShellState) -> int:
    """ Body of the forked child: redirect, then pwd or exec. """
    try:
        if cmd.stdin is not None:
            redirect_input(state.evaluate(cmd.stdin))
        redirect_output(cmd, state)
    except RedirectionError as e:
        report(f"{e.path}: {e.strerror}")
        return STATUS_FAILURE

    verb = state.evaluate(cmd.verb)
    argv = build_argv(cmd.params, verb, state)

    if verb == PWD_COMMAND:
        try:
            cwd = state.getcwd()
        except OSError as e:
            report(f"pwd: {e.strerror}")
            return STATUS_FAILURE
        os.write(STDOUT_FILENO, os.fsencode(cwd + "\n"))
        return STATUS_SUCCESS

    try:
        os.execvpe(verb, argv[:-1], dict(state.environ))
    except FileNotFoundError:
        report(f"{verb}: command not found")
    except OSError as e:
        report(f"{verb}: {e.strerror}")
        return STATUS_NOT_EXECUTABLE
    except ValueError as e:
        report(f"{verb}: {e}")
    return STATUS_NOT_FOUND


def change_directory(cmd: Command, state: ShellState) -> int:
    """ cd runs in the shell's own process so the new cwd sticks. """
    if cmd.stdout is not None:
        path = state.evaluate(cmd.stdout)
        try:
            os.close(open_redirect(path, cmd.append))
        except RedirectionError as e:
            print(f"cd: {path}: {e.strerror}", file=sys.stderr)
            return STATUS_FAILURE

    if cmd.params is None:
        return STATUS_SUCCESS

    target = state.evaluate(cmd.params)
    try:
        state.chdir(target)
        return STATUS_SUCCESS
    except FileNotFoundError:
        print(f"cd: no such file or directory: {target}", file=sys.stderr)
    except NotADirectoryError:
        print(f"cd: not a directory: {target}", file=sys.stderr)
    except OSError as e:
        print(f"cd: {target}: {e.strerror}", file=sys.stderr)
    except ValueError as e:
        print(f"cd: {target!r}: {e}", file=sys.stderr)
    return STATUS_FAILURE


def assign_variable(name: str, value: Word, state: ShellState) -> int:
    try:
        state.set_var(name, state.evaluate(value))
    except (OSError, ValueError) as e:
        print(f"{name}: cannot set variable: {e}", file=sys.stderr)
        return STATUS_FAILURE
    return STATUS_SUCCESS


def execute_command(cmd: Command, state: ShellState) -> int:
    verb = state.evaluate(cmd.verb)
    if verb == CD_COMMAND:
        return change_directory(cmd, state)

    assignment = cmd.verb.assignment()
    if assignment is not None:
        name, value = assignment
        return assign_variable(name, value, state)

    # Everything else runs in a child so redirections stay local to it.
    try:
        child = spawn(lambda: run_in_child(cmd, state))
    except OSError as e:
        print(f"fork: {e.strerror}", file=sys.stderr)
        return STATUS_FAILURE
    return child.wait()
