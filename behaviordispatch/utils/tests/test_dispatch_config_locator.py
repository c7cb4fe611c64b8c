import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch
from behaviordispatch.utils.dispatch_config_locator import ConfigNameEnum, DispatchConfigLocator

class TestDispatchConfigLocator(unittest.TestCase):
    def setUp(self):
        DispatchConfigLocator.reset()

    def tearDown(self):
        DispatchConfigLocator.reset()

    def test_resolve_not_set(self):
        with patch.dict(os.environ, {}, clear=True):
            self.assertIsNone(DispatchConfigLocator.resolve_dispatch_config_path())

    def test_resolve_relative_path_is_rejected(self):
        with patch.dict(os.environ, {"DISPATCH_CONFIG_PATH": "relative/dir"}, clear=True):
            self.assertIsNone(DispatchConfigLocator.resolve_dispatch_config_path())

    def test_find_in_config_dir(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            config_dir = Path(temp_dir)
            (config_dir / ConfigNameEnum.LLM_CONFIG_JSON.value).write_text("{}")

            # Act
            with patch.dict(os.environ, {"DISPATCH_CONFIG_PATH": str(config_dir)}, clear=True):
                locator = DispatchConfigLocator.load()

            # Assert
            self.assertEqual(locator.dispatch_config_path, config_dir)
            self.assertEqual(locator.llm_config_json_path, config_dir / "llm_config.json")

    def test_not_found(self):
        # Arrange
        with tempfile.TemporaryDirectory() as temp_dir:
            config_dir = Path(temp_dir)

            # Act
            path = DispatchConfigLocator.find_file_in_search_order("no_such_config_file_for_dispatch.json", config_dir)

            # Assert
            self.assertIsNone(path)

    def test_load_is_cached_until_reset(self):
        # Arrange
        locator1 = DispatchConfigLocator.load()

        # Act
        locator2 = DispatchConfigLocator.load()
        DispatchConfigLocator.reset()
        locator3 = DispatchConfigLocator.load()

        # Assert
        self.assertIs(locator1, locator2)
        self.assertIsNot(locator1, locator3)

if __name__ == '__main__':
    unittest.main()
