""" Exceptions used by the shell. """


class ShellExit(Exception):
    """ Raised when the session should stop processing commands. """
    def __init__(self, status=0):
        super().__init__(status)
        self.status = status


class RedirectionError(OSError):
    """ Opening or duplicating a redirection target failed. """
    def __init__(self, path, err: Exception):
        # ValueError (e.g. an embedded NUL) carries no errno
        super().__init__(getattr(err, "errno", None), getattr(err, "strerror", None) or str(err), path)
        self.path = path
