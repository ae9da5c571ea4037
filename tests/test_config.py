import sys
import unittest
from pathlib import Path
from unittest import mock

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import intelligence_config  # type: ignore
from intelligence_config import IntelligenceConfig, RenderConfig, load_config  # type: ignore


class LoadConfigTests(unittest.TestCase):
    def test_defaults_when_environment_is_empty(self):
        cfg = load_config({})
        self.assertEqual(cfg, IntelligenceConfig())
        self.assertEqual(cfg.max_file_bytes, 500_000)
        self.assertEqual(cfg.parse_timeout_micros, 1_000_000)
        self.assertEqual(cfg.render, RenderConfig(with_line_numbers=True, indent_step="\t"))

    def test_overrides(self):
        cfg = load_config(
            {
                "TREELENS_MAX_FILE_BYTES": "1_000",
                "TREELENS_PARSE_TIMEOUT_MICROS": " 2500 ",
                "TREELENS_LINE_NUMBERS": "off",
                "TREELENS_INDENT": "    ",
            }
        )
        self.assertEqual(cfg.max_file_bytes, 1000)
        self.assertEqual(cfg.parse_timeout_micros, 2500)
        self.assertFalse(cfg.render.with_line_numbers)
        self.assertEqual(cfg.render.indent_step, "    ")

    def test_blank_values_fall_back_to_defaults(self):
        cfg = load_config({"TREELENS_MAX_FILE_BYTES": "  ", "TREELENS_INDENT": ""})
        self.assertEqual(cfg.max_file_bytes, intelligence_config.MAX_FILE_BYTES)
        self.assertEqual(cfg.render.indent_step, intelligence_config.INDENT_STEP)

    def test_invalid_values_name_the_variable(self):
        with self.assertRaisesRegex(ValueError, "TREELENS_MAX_FILE_BYTES"):
            load_config({"TREELENS_MAX_FILE_BYTES": "lots"})
        with self.assertRaisesRegex(ValueError, "TREELENS_PARSE_TIMEOUT_MICROS"):
            load_config({"TREELENS_PARSE_TIMEOUT_MICROS": "0"})
        with self.assertRaisesRegex(ValueError, "TREELENS_LINE_NUMBERS"):
            load_config({"TREELENS_LINE_NUMBERS": "maybe"})

    def test_reads_process_environment_by_default(self):
        with mock.patch.dict("os.environ", {"TREELENS_LINE_NUMBERS": "no"}, clear=True):
            self.assertFalse(load_config().render.with_line_numbers)


if __name__ == "__main__":
    unittest.main(verbosity=2)
