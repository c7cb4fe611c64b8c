import tempfile
import unittest
from pathlib import Path
from behaviordispatch.archive.output_archiver import ARCHIVE_DIR_NAME, archive_timestamp, write_if_changed

class TestWriteIfChanged(unittest.TestCase):
    def test_new_file(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "outputs" / "prioritization.md"

            # Act
            result = write_if_changed(path, "# prioritization")

            # Assert
            self.assertFalse(result.archived)
            self.assertIsNone(result.archive_path)
            self.assertEqual(path.read_text(encoding="utf-8"), "# prioritization")
            self.assertFalse((path.parent / ARCHIVE_DIR_NAME).exists())

    def test_unchanged_content(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "coordination.md"
            write_if_changed(path, "# coordination")

            # Act
            result = write_if_changed(path, "# coordination")

            # Assert
            self.assertFalse(result.archived)
            self.assertFalse((path.parent / ARCHIVE_DIR_NAME).exists())
            self.assertEqual(path.read_text(encoding="utf-8"), "# coordination")

    def test_changed_content(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "coordination.json"
            write_if_changed(path, "[]")

            # Act
            result = write_if_changed(path, '[{"rank": "r1"}]')

            # Assert
            self.assertTrue(result.archived)
            self.assertEqual(result.archive_path.parent, path.parent / ARCHIVE_DIR_NAME)
            self.assertTrue(result.archive_path.name.endswith(".coordination.json"))
            self.assertEqual(result.archive_path.read_text(encoding="utf-8"), "[]")
            self.assertEqual(path.read_text(encoding="utf-8"), '[{"rank": "r1"}]')

    def test_invalid_arguments(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            with self.assertRaises(ValueError):
                write_if_changed(str(Path(temp_dir) / "a.md"), "text")
            with self.assertRaises(ValueError):
                write_if_changed(Path(temp_dir) / "a.md", b"bytes")

class TestArchiveTimestamp(unittest.TestCase):
    def test_filename_safe(self):
        timestamp = archive_timestamp()
        self.assertNotIn(":", timestamp)
        self.assertNotIn(".", timestamp)

if __name__ == '__main__':
    unittest.main()
