import os
import tempfile
import unittest
from unittest.mock import patch

import shell
from command import Command, CommandNode, Operator, Word
from constants import SHELL_EXIT
from exceptions import ShellExit
from shell_state import ShellState


def simple(verb, *params):
    return CommandNode.leaf(Command(Word.literal(verb), Word.chain(*map(Word.literal, params))))


class TestShell(unittest.TestCase):
    def setUp(self):
        self.shell = shell.Shell()
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.cwd = os.getcwd()
        os.chdir(self.tmpdir.name)
        self.addCleanup(lambda: os.chdir(self.cwd))

    def test_default_state(self):
        self.assertIsInstance(self.shell.state, ShellState)

    def test_explicit_state(self):
        state = ShellState(environ={})
        self.assertIs(state, shell.Shell(state).state)

    def test_execute_records_status(self):
        self.assertEqual(1, self.shell.execute(simple("false")))
        self.assertEqual(1, self.shell.state.last_status)
        self.assertEqual(0, self.shell.execute(simple("true")))
        self.assertEqual(0, self.shell.state.last_status)

    def test_execute_raises_on_exit(self):
        self.shell.execute(simple("false"))
        with self.assertRaises(ShellExit) as ctx:
            self.shell.execute(simple("exit"))
        self.assertEqual(1, ctx.exception.status)

    def test_run_stops_at_exit(self):
        trees = [
            simple("touch", "a"),
            CommandNode.binary(Operator.SEQUENTIAL, simple("quit"), simple("touch", "b")),
            simple("touch", "c"),
        ]
        rc = self.shell.run(trees)

        self.assertEqual(0, rc)
        self.assertTrue(os.path.exists("a"))
        self.assertFalse(os.path.exists("b"))
        self.assertFalse(os.path.exists("c"))

    def test_run_returns_last_status_when_trees_run_out(self):
        self.assertEqual(1, self.shell.run([simple("true"), simple("false")]))

    def test_run_with_nothing(self):
        self.assertEqual(0, self.shell.run([]))

    def test_run_reads_lazily(self):
        produced = []

        def trees():
            for name in ("first", "second"):
                produced.append(name)
                yield simple("exit") if name == "first" else simple("true")

        self.shell.run(trees())
        self.assertEqual(["first"], produced)

    def test_assignment_persists_between_trees(self):
        with patch.dict(os.environ, {}):
            self.shell.run([simple("GREETING=hello")])
            self.assertEqual("hello", self.shell.state.evaluate(Word.variable("GREETING")))

    def test_sentinel_is_not_recorded_as_status(self):
        with patch.object(shell, "execute_tree", return_value=SHELL_EXIT):
            self.assertEqual(0, self.shell.run([simple("anything")]))
        self.assertEqual(0, self.shell.state.last_status)


if __name__ == "__main__":
    unittest.main()
