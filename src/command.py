""" Command tree handed to the executor by the parser. """
import enum

from constants import VAR_NAME_RX


class Literal:
    """ Fragment of a word taken verbatim. """
    def __init__(self, text: str):
        self.text = text

    def __repr__(self):
        return f"Literal({self.text!r})"


class Substitution:
    """ Fragment of a word replaced by the value of an environment variable. """
    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"Substitution({self.name!r})"


class Word:
    """
    One token, built from fragments concatenated left to right.
    Words are linked through next_word to form an argument list.
    """
    def __init__(self, parts, next_word=None):
        self.parts = tuple(parts)
        self.next_word = next_word

    @classmethod
    def literal(cls, text: str) -> "Word":
        return cls([Literal(text)])

    @classmethod
    def variable(cls, name: str) -> "Word":
        return cls([Substitution(name)])

    @staticmethod
    def chain(*words: "Word") -> "Word|None":
        """ Link words horizontally; returns the head of the list. """
        head = None
        for word in reversed(words):
            word.next_word = head
            head = word
        return head

    def __iter__(self):
        word = self
        while word is not None:
            yield word
            word = word.next_word

    def __repr__(self):
        return f"Word({list(self.parts)!r})"

    def assignment(self) -> "tuple[str, Word]|None":
        """
        Return (name, value) if the fragments spell NAME=VALUE.

        The name must come entirely from literal fragments before the
        first '='; anything after it, substitutions included, is the value.
        """
        prefix = ""
        for idx, part in enumerate(self.parts):
            if not isinstance(part, Literal):
                return None
            if "=" not in part.text:
                prefix += part.text
                continue

            head, rest = part.text.split("=", 1)
            name = prefix + head
            if not VAR_NAME_RX.match(name):
                return None
            value_parts = [Literal(rest)] if rest else []
            value_parts.extend(self.parts[idx + 1:])
            return name, Word(value_parts)
        return None


class Command:
    """ A simple command: verb, parameters and redirections. """
    def __init__(self, verb: Word, params: Word|None = None, stdin: Word|None = None,
                 stdout: Word|None = None, stderr: Word|None = None,
                 append=False, stderr_append=False):
        self.verb = verb
        self.params = params      # head of a word chain or None

        self.stdin = stdin        # word naming a file or None

        self.stdout = stdout      # word naming a file or None
        self.append = append      # True for >>

        self.stderr = stderr      # word naming a file or None
        self.stderr_append = stderr_append


class Operator(enum.Enum):
    NONE = "none"
    SEQUENTIAL = ";"
    PARALLEL = "&"
    CONDITIONAL_ZERO = "&&"
    CONDITIONAL_NZERO = "||"
    PIPE = "|"


class CommandNode:
    """ Node of the operator tree: a simple command or two joined subtrees. """
    def __init__(self, op: Operator = Operator.NONE, command: Command|None = None,
                 left: "CommandNode|None" = None, right: "CommandNode|None" = None):
        if op is Operator.NONE:
            if left is not None or right is not None:
                raise ValueError("a simple command node cannot have children")
        elif left is None or right is None:
            raise ValueError(f"operator {op.value!r} needs two operands")
        elif command is not None:
            raise ValueError(f"operator {op.value!r} cannot hold a simple command")

        self.op = op
        self.command = command
        self.left = left
        self.right = right

    @classmethod
    def leaf(cls, command: Command) -> "CommandNode":
        return cls(Operator.NONE, command=command)

    @classmethod
    def binary(cls, op: Operator, left: "CommandNode", right: "CommandNode") -> "CommandNode":
        return cls(op, left=left, right=right)
