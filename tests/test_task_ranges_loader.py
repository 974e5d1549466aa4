import tempfile
import unittest
from pathlib import Path

from congress_bot.infrastructure.task_ranges_loader import load_task_ranges_from_yaml


def _write_yaml(path: Path, content: str):
    path.write_text(content, encoding="utf-8")


class LoadTaskRangesTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.base = Path(self.tmpdir.name)

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_missing_file_raises(self):
        with self.assertRaisesRegex(RuntimeError, "task ranges file not found"):
            load_task_ranges_from_yaml(str(self.base / "missing.yaml"))

    def test_invalid_structure_raises(self):
        path = self.base / "bad.yaml"
        _write_yaml(path, "[]")
        with self.assertRaisesRegex(RuntimeError, "Invalid task_ranges.yaml format"):
            load_task_ranges_from_yaml(str(path))

    def test_days_must_be_mapping(self):
        path = self.base / "list.yaml"
        _write_yaml(path, "days:\n  - Tasks!A1:F2\n")
        with self.assertRaisesRegex(RuntimeError, "days must be a mapping"):
            load_task_ranges_from_yaml(str(path))

    def test_invalid_entry_raises(self):
        path = self.base / "invalid.yaml"
        _write_yaml(path, "days:\n  1: A2:F30\n")
        with self.assertRaisesRegex(RuntimeError, "Invalid task range entry"):
            load_task_ranges_from_yaml(str(path))

    def test_loads_ranges_with_int_keys(self):
        path = self.base / "ranges.yaml"
        _write_yaml(
            path,
            """
days:
  1: " Tasks-D1!A2:F30 "
  "2": "Tasks-D2!A2:F30"
""",
        )

        result = load_task_ranges_from_yaml(str(path))

        self.assertEqual(result, {1: "Tasks-D1!A2:F30", 2: "Tasks-D2!A2:F30"})

    def test_shipped_config_covers_nine_days(self):
        shipped = Path(__file__).resolve().parents[1] / "config" / "task_ranges.yaml"

        result = load_task_ranges_from_yaml(str(shipped))

        self.assertEqual(sorted(result), list(range(1, 10)))


if __name__ == "__main__":
    unittest.main()
