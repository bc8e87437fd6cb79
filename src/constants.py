import re

VAR_NAME_RX = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

STDIN_FILENO = 0
STDOUT_FILENO = 1
STDERR_FILENO = 2

# permission bits for files created by redirection
FILE_MODE = 0o644

STATUS_SUCCESS = 0
STATUS_FAILURE = -1
STATUS_SIGNALED = 1
STATUS_NOT_EXECUTABLE = 126
STATUS_NOT_FOUND = 127

# never produced by waitpid (0..255) nor by a builtin failure
SHELL_EXIT = -100

CD_COMMAND = "cd"
PWD_COMMAND = "pwd"
EXIT_COMMANDS = ("exit", "quit")
