""" Create and synchronize the processes behind `&` and `|`. """
import os
import sys
import traceback

from constants import (
    SHELL_EXIT,
    STATUS_FAILURE,
    STATUS_SIGNALED,
    STATUS_SUCCESS,
    STDIN_FILENO,
    STDOUT_FILENO,
)


def flush_std_streams():
    """ Flush Python-level stdio so buffered text is neither lost nor written twice. """
    for stream in (sys.stdout, sys.stderr):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            # stream already closed or its reader went away
            pass


class ChildProcess:
    """ Handle for a forked child; wait() reaps it exactly once. """
    def __init__(self, pid: int):
        self.pid = pid
        self.status = None

    def wait(self) -> int:
        if self.status is not None:
            return self.status

        try:
            _, raw = os.waitpid(self.pid, 0)
        except ChildProcessError:
            self.status = STATUS_FAILURE
            return self.status

        if os.WIFEXITED(raw):
            self.status = os.WEXITSTATUS(raw)
        else:
            self.status = STATUS_SIGNALED
        return self.status


def spawn(target) -> ChildProcess:
    """
    Fork and run target() in the child, exiting with its status.

    The child never returns into the caller's code: whatever target()
    does, including raising, ends in os._exit(). A session-termination
    status only ends the child itself, so it exits with success.
    Raises OSError if the fork fails.
    """
    flush_std_streams()
    pid = os.fork()
    if pid == 0:
        status = STATUS_FAILURE
        try:
            status = target() or STATUS_SUCCESS
            if status == SHELL_EXIT:
                status = STATUS_SUCCESS
        except BaseException:
            traceback.print_exc()
            status = STATUS_FAILURE
        finally:
            flush_std_streams()
            os._exit(status & 0xFF)
    return ChildProcess(pid)


class Pipe:
    """ Both ends of an anonymous pipe, closed on every exit path. """
    def __init__(self):
        self.read_fd, self.write_fd = os.pipe()

    def close_read(self):
        if self.read_fd is not None:
            os.close(self.read_fd)
            self.read_fd = None

    def close_write(self):
        if self.write_fd is not None:
            os.close(self.write_fd)
            self.write_fd = None

    def close(self):
        self.close_read()
        self.close_write()

    def attach(self, target_fd: int):
        """ Make one end of the pipe the given standard stream and drop both originals. """
        if target_fd == STDOUT_FILENO:
            self.close_read()
            fd, self.write_fd = self.write_fd, None
        else:
            self.close_write()
            fd, self.read_fd = self.read_fd, None

        if fd != target_fd:
            os.dup2(fd, target_fd)
            os.close(fd)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def run_in_parallel(cmd1, cmd2, state, evaluate) -> int:
    """ Run both subtrees in their own processes and wait for both. """
    try:
        first = spawn(lambda: evaluate(cmd1, state))
    except OSError as e:
        print(f"fork: {e.strerror}", file=sys.stderr)
        return STATUS_FAILURE

    try:
        second = spawn(lambda: evaluate(cmd2, state))
    except OSError as e:
        print(f"fork: {e.strerror}", file=sys.stderr)
        first.wait()
        return STATUS_FAILURE

    first.wait()
    second.wait()
    return STATUS_SUCCESS


def _pipe_stage(pipe: Pipe, target_fd: int, tree, state, evaluate) -> int:
    pipe.attach(target_fd)
    return evaluate(tree, state)


def run_on_pipe(cmd1, cmd2, state, evaluate) -> int:
    """ Connect cmd1's stdout to cmd2's stdin; the status is cmd2's. """
    try:
        pipe = Pipe()
    except OSError as e:
        print(f"pipe: {e.strerror}", file=sys.stderr)
        return STATUS_FAILURE

    with pipe:
        try:
            writer = spawn(lambda: _pipe_stage(pipe, STDOUT_FILENO, cmd1, state, evaluate))
        except OSError as e:
            print(f"fork: {e.strerror}", file=sys.stderr)
            return STATUS_FAILURE

        try:
            reader = spawn(lambda: _pipe_stage(pipe, STDIN_FILENO, cmd2, state, evaluate))
        except OSError as e:
            print(f"fork: {e.strerror}", file=sys.stderr)
            pipe.close()
            writer.wait()
            return STATUS_FAILURE

    # the parent holds no pipe ends past this point
    writer.wait()
    return reader.wait()
