from __future__ import annotations

import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from textreplace.core import runtime_paths


class RuntimePathsTests(unittest.TestCase):
    def test_source_runtime_root_points_to_project(self) -> None:
        root = runtime_paths.runtime_root()
        self.assertTrue((root / "textreplace").exists())
        self.assertTrue(runtime_paths.default_table_asset().exists())

    def test_frozen_runtime_root_uses_executable_parent(self) -> None:
        install_dir = Path.cwd().resolve() / "dist" / "TextReplace"
        fake_exe = str(install_dir / "TextReplace.exe")
        with patch.object(sys, "frozen", True, create=True):
            with patch.object(sys, "executable", fake_exe):
                self.assertEqual(runtime_paths.runtime_root(), install_dir)
                self.assertEqual(
                    runtime_paths.default_table_asset(),
                    install_dir / "assets" / "text_replacements.csv",
                )
                self.assertEqual(runtime_paths.logs_dir(), install_dir / "logs")


if __name__ == "__main__":
    unittest.main()
