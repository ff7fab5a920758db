import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from lucid.log import disable_tracing, enable_tracing


class TestTracing(unittest.TestCase):
    """Test trace file logging"""

    @patch("lucid.log.console")
    def test_trace_file_receives_records(self, mock_console):
        """Test records from lucid modules end up in the trace file"""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "trace.log"
            handler = enable_tracing(path)
            self.assertIsNotNone(handler)
            try:
                logging.getLogger("lucid.formatting.printer").debug("formatted %s", "value")
            finally:
                disable_tracing(handler)

            content = path.read_text(encoding="utf-8")
        self.assertIn("Tracing enabled", content)
        self.assertIn("lucid.formatting.printer - formatted value", content)
        self.assertIn(str(path), str(mock_console.print.call_args[0][0]))

    @patch("lucid.log.console")
    def test_unwritable_trace_file(self, mock_console):
        """Test an unwritable trace file only warns"""
        with tempfile.TemporaryDirectory() as temp_dir:
            blocker = Path(temp_dir) / "file"
            blocker.write_text("", encoding="utf-8")
            self.assertIsNone(enable_tracing(blocker / "trace.log"))
        self.assertIn("Warning", str(mock_console.print.call_args[0][0]))
