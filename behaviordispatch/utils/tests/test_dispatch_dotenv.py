import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch
from behaviordispatch.utils.dispatch_dotenv import DispatchDotEnv

class TestDispatchDotEnv(unittest.TestCase):
    def test_load_from_file(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".env"
            path.write_text("OPENROUTER_API_KEY=secret-from-file\nOTHER=1\n")

            # Act
            with patch.dict(os.environ, {}, clear=True):
                dotenv = DispatchDotEnv.load_from_path(path)

        # Assert
        self.assertEqual(dotenv.get("OPENROUTER_API_KEY"), "secret-from-file")
        self.assertEqual(dotenv.get("OTHER"), "1")
        self.assertIsNone(dotenv.get("MISSING"))

    def test_environment_wins(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".env"
            path.write_text("OPENROUTER_API_KEY=secret-from-file\n")

            # Act
            with patch.dict(os.environ, {"OPENROUTER_API_KEY": "secret-from-env"}, clear=True):
                dotenv = DispatchDotEnv.load_from_path(path)

        # Assert
        self.assertEqual(dotenv.get("OPENROUTER_API_KEY"), "secret-from-env")

    def test_environment_is_not_modified(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / ".env"
            path.write_text("ONLY_IN_DOTENV_FILE=1\n")

            # Act
            with patch.dict(os.environ, {}, clear=True):
                DispatchDotEnv.load_from_path(path)
                in_environ = "ONLY_IN_DOTENV_FILE" in os.environ

        # Assert
        self.assertFalse(in_environ)

    def test_no_file(self):
        with patch.dict(os.environ, {"A": "b"}, clear=True):
            dotenv = DispatchDotEnv.load_from_path(None)
        self.assertIsNone(dotenv.dotenv_path)
        self.assertEqual(dotenv.dotenv_dict, {"A": "b"})

if __name__ == '__main__':
    unittest.main()
