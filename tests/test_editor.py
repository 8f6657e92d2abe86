from __future__ import annotations

import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from algoscales.editor import edit_code, resolve_editor_command, scratch_path
from algoscales.errors import EditorError


class ResolveEditorTests(unittest.TestCase):
    def test_configured_command_wins_over_environment(self) -> None:
        with mock.patch.dict("algoscales.editor.os.environ", {"VISUAL": "code -w", "EDITOR": "nano"}, clear=True):
            self.assertEqual(resolve_editor_command("nvim -u NONE"), ["nvim", "-u", "NONE"])
            self.assertEqual(resolve_editor_command(""), ["code", "-w"])

    def test_falls_back_to_editor_then_vi(self) -> None:
        with mock.patch.dict("algoscales.editor.os.environ", {"EDITOR": "nano"}, clear=True):
            self.assertEqual(resolve_editor_command(), ["nano"])
        with mock.patch.dict("algoscales.editor.os.environ", {}, clear=True):
            self.assertEqual(resolve_editor_command("   "), ["vi"])

    def test_unparseable_command_raises(self) -> None:
        with self.assertRaises(EditorError):
            resolve_editor_command("vim 'unterminated")

    def test_scratch_path_uses_language_extension(self) -> None:
        self.assertEqual(scratch_path(Path("/ws"), "python"), Path("/ws/solution.py"))
        self.assertEqual(scratch_path(Path("/ws"), "brainfuck"), Path("/ws/solution.txt"))


class EditCodeTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.target = Path(self._tmp.name) / "ws" / "solution.py"
        self.disable = mock.Mock()
        self.enable = mock.Mock()

    def test_saved_contents_are_returned_and_scratch_removed(self) -> None:
        def fake_run(cmd, check=False):
            self.assertEqual(Path(cmd[-1]).read_text(encoding="utf-8"), "old\n")
            self.disable.assert_called_once()
            self.enable.assert_not_called()
            Path(cmd[-1]).write_text("new\n", encoding="utf-8")
            return subprocess.CompletedProcess(cmd, 0)

        code = edit_code("old\n", self.target, ["vi"], self.disable, self.enable, run=fake_run)

        self.assertEqual(code, "new\n")
        self.enable.assert_called_once()
        self.assertFalse(self.target.exists())

    def test_non_zero_exit_raises_and_removes_scratch(self) -> None:
        run = mock.Mock(return_value=subprocess.CompletedProcess(["vi"], 3))

        with self.assertRaises(EditorError) as ctx:
            edit_code("old\n", self.target, ["vi"], self.disable, self.enable, run=run)

        self.assertEqual(ctx.exception.exit_status, 3)
        self.assertFalse(self.target.exists())
        self.enable.assert_called_once()

    def test_missing_editor_binary_restores_tui(self) -> None:
        run = mock.Mock(side_effect=FileNotFoundError("no such editor"))

        with self.assertRaises(EditorError):
            edit_code("old\n", self.target, ["nope"], self.disable, self.enable, run=run)

        self.disable.assert_called_once()
        self.enable.assert_called_once()
        self.assertFalse(self.target.exists())


if __name__ == "__main__":
    unittest.main()
