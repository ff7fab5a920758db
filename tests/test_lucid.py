import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from lucid import (
    CONFIG_FILE,
    DEFAULT_CONFIG,
    HISTORY_FILE,
    SCRIPT_FILE,
    MemberDisplayMode,
    ScriptRunner,
    StyledString,
    get_bool_setting,
    get_int_setting,
    get_print_options,
    get_setting,
    load_script,
    print_header,
    save_script,
)
from lucid.config import get_culture_setting, get_radix_setting
from lucid.formatting.options import INVARIANT_CULTURE
from lucid.main import Repl


class TestScriptFiles(unittest.TestCase):
    """Test script save/load functionality"""

    def setUp(self):
        """Create a temporary file for testing"""
        self.temp_file = tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".py")  # noqa: SIM115
        self.temp_path = Path(self.temp_file.name)
        self.temp_file.close()

    def tearDown(self):
        """Clean up temporary file"""
        if self.temp_path.exists():
            self.temp_path.unlink()

    def test_save_script_success(self):
        """Test successful script save"""
        result = save_script(["x = 1", "print(x)"], self.temp_path)
        self.assertTrue(result)
        self.assertTrue(self.temp_path.exists())

    def test_save_script_content_verification(self):
        """Test that submissions are separated by a blank line"""
        save_script(["x = 1\n", "def f():\n    return x\n"], self.temp_path)
        content = self.temp_path.read_text(encoding="utf-8")
        self.assertEqual(content, "x = 1\n\ndef f():\n    return x\n")

    def test_save_empty_script(self):
        """Test saving a session without submissions writes an empty file"""
        save_script([], self.temp_path)
        self.assertEqual(self.temp_path.read_text(encoding="utf-8"), "")

    def test_load_script_success(self):
        """Test successful script load"""
        self.temp_path.write_text("y = 2\n", encoding="utf-8")
        self.assertEqual(load_script(self.temp_path), "y = 2\n")

    def test_load_script_nonexistent_file(self):
        """Test loading from non-existent file"""
        non_existent = Path("/tmp/this_file_does_not_exist_lucid_test.py")
        self.assertIsNone(load_script(non_existent))

    @patch("lucid.session.console")
    def test_save_script_invalid_path(self, mock_console):
        """Test saving to invalid path"""
        invalid_path = Path("/invalid/directory/that/does/not/exist/session.py")
        result = save_script(["x = 1"], invalid_path)
        self.assertFalse(result)
        mock_console.print.assert_called_once()


class TestPrintHeader(unittest.TestCase):
    """Test header printing functionality"""

    @patch("lucid.utils.console")
    def test_print_header_calls_console(self, mock_console):
        """Test that print_header calls console.print twice (logo + panel)"""
        print_header()
        self.assertEqual(mock_console.print.call_count, 2)

    @patch("lucid.utils.console")
    def test_print_header_contains_config_path(self, mock_console):
        """Test that header shows where the configuration lives"""
        print_header()
        panel = mock_console.print.call_args_list[1][0][0]
        panel_text = str(panel.renderable)
        self.assertIn(str(CONFIG_FILE), panel_text)

    @patch("lucid.utils.console")
    def test_print_header_lists_commands(self, mock_console):
        """Test that header lists the main commands"""
        print_header()
        panel_text = str(mock_console.print.call_args_list[1][0][0].renderable)
        for command in ("/help", "/inspect", "/quit"):
            self.assertIn(command, panel_text)


class TestConfiguration(unittest.TestCase):
    """Test configuration values"""

    def test_default_values_exist(self):
        """Test that every setting has a default"""
        for key in ("NUMBER_RADIX", "MAXIMUM_OUTPUT_LENGTH", "MAXIMUM_LINE_LENGTH", "ELLIPSIS"):
            self.assertIn(key, DEFAULT_CONFIG)

    def test_paths_live_together(self):
        """Test the default files share one directory"""
        overrides = ("LUCID_DIR", "LUCID_CONFIG_FILE", "LUCID_HISTORY_FILE")
        if not any(os.getenv(name) for name in overrides):
            self.assertEqual(CONFIG_FILE.parent, HISTORY_FILE.parent)

    @patch.dict(os.environ, {"LUCID_TEST_SETTING": "from-env"})
    def test_environment_wins(self):
        """Test environment variables take priority"""
        self.assertEqual(get_setting("LUCID_TEST_SETTING", "default"), "from-env")

    @patch("lucid.config.load_config", return_value={"LUCID_TEST_SETTING": 7})
    def test_config_file_value(self, _mock_load):
        """Test config file values are used when the environment is silent"""
        self.assertEqual(get_setting("LUCID_TEST_SETTING", "default"), "7")

    @patch("lucid.config.load_config", return_value={})
    def test_default_value(self, _mock_load):
        """Test the default is used when nothing else is set"""
        self.assertEqual(get_setting("LUCID_TEST_SETTING", "default"), "default")

    @patch("lucid.config.console")
    @patch.dict(os.environ, {"LUCID_TEST_NUMBER": "many"})
    def test_invalid_integer_warns(self, mock_console):
        """Test invalid integers fall back to the default with a warning"""
        self.assertEqual(get_int_setting("LUCID_TEST_NUMBER", 5), 5)
        mock_console.print.assert_called_once()

    @patch("lucid.config.console")
    @patch.dict(os.environ, {"LUCID_TEST_RADIX": "8"})
    def test_unsupported_radix_warns(self, mock_console):
        """Test only radix 10 and 16 are accepted from configuration"""
        self.assertEqual(get_radix_setting("LUCID_TEST_RADIX", 10), 10)
        mock_console.print.assert_called_once()

    @patch.dict(os.environ, {"LUCID_TEST_FLAG": "Yes"})
    def test_boolean_setting(self):
        """Test truthy spellings are accepted for booleans"""
        self.assertTrue(get_bool_setting("LUCID_TEST_FLAG", False))

    @patch.dict(os.environ, {"NUMBER_RADIX": "16", "MAXIMUM_OUTPUT_LENGTH": "500"})
    def test_print_options(self):
        """Test print options are built from the settings"""
        summary = get_print_options(detailed=False)
        detailed = get_print_options(detailed=True)
        self.assertEqual(summary.number_radix, 16)
        self.assertEqual(summary.maximum_output_length, 500)
        self.assertEqual(summary.member_display_format, MemberDisplayMode.SINGLE_LINE)
        self.assertEqual(detailed.member_display_format, MemberDisplayMode.SEPARATE_LINES)

    @patch("lucid.formatting.options.locale.localeconv", return_value={"decimal_point": ","})
    @patch("lucid.config.locale.setlocale")
    @patch.dict(os.environ, {"NUMBER_CULTURE": "current"})
    def test_current_culture(self, mock_setlocale, _mock_localeconv):
        """Test the current culture reads the decimal point of the system locale"""
        options = get_print_options(detailed=False)
        self.assertEqual(options.culture.decimal_point, ",")
        mock_setlocale.assert_called()

    @patch("lucid.config.console")
    @patch.dict(os.environ, {"LUCID_TEST_CULTURE": "klingon"})
    def test_unknown_culture_warns(self, mock_console):
        """Test unknown cultures fall back to the invariant culture with a warning"""
        self.assertEqual(get_culture_setting("LUCID_TEST_CULTURE", "invariant"), INVARIANT_CULTURE)
        mock_console.print.assert_called_once()


class TestRepl(unittest.TestCase):
    """Test the console loop's command handling"""

    def setUp(self):
        self.repl = Repl(ScriptRunner(), detailed=False)

    def printed(self, mock_console) -> str:
        return "\n".join(
            str(call.args[0]) for call in mock_console.print.call_args_list if call.args
        )

    @patch("lucid.main.console")
    def test_print_result(self, mock_console):
        """Test results are printed as styled strings"""
        self.repl.print_result(self.repl.runner.evaluate("[1, 2]"))
        output = mock_console.print.call_args[0][0]
        self.assertIsInstance(output, StyledString)
        self.assertEqual(output.plain, "list(2) { 1, 2 }")

    @patch("lucid.main.console")
    def test_statement_prints_nothing(self, mock_console):
        """Test statements without a value print nothing"""
        self.repl.print_result(self.repl.runner.evaluate("x = 1"))
        mock_console.print.assert_not_called()

    @patch("lucid.main.console")
    def test_error_result(self, mock_console):
        """Test errors are printed through the pretty-printer"""
        self.repl.print_result(self.repl.runner.evaluate("1 / 0"))
        self.assertEqual(self.printed(mock_console), "ZeroDivisionError: division by zero")

    @patch("lucid.main.console")
    def test_quit(self, mock_console):
        """Test /quit and /exit stop the loop"""
        self.assertFalse(self.repl.handle_command("/quit"))
        self.assertFalse(self.repl.handle_command("/exit"))

    @patch("lucid.main.console")
    def test_unknown_command(self, mock_console):
        """Test unknown commands keep the loop running and say so"""
        self.assertTrue(self.repl.handle_command("/nope"))
        self.assertIn("Unknown command: /nope", self.printed(mock_console))

    @patch("lucid.main.console")
    def test_reset(self, mock_console):
        """Test /reset clears the session"""
        self.repl.runner.evaluate("a = 1")
        self.repl.handle_command("/reset")
        self.assertNotIn("a", self.repl.runner.namespace)

    @patch("lucid.main.console")
    def test_inspect_is_detailed(self, mock_console):
        """Test /inspect prints strings raw, as detailed output does"""
        self.repl.handle_command("/inspect 'a' + 'b'")
        self.assertEqual(self.printed(mock_console), "ab")

    @patch("lucid.main.console")
    def test_save_and_load(self, mock_console):
        """Test /save writes the session and /load runs it in a fresh one"""
        self.repl.runner.evaluate("a = 20")
        self.repl.runner.evaluate("b = a + 1")
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "saved.py"
            self.repl.handle_command(f"/save {path}")
            self.assertEqual(path.read_text(encoding="utf-8"), "a = 20\n\nb = a + 1\n")

            self.repl.handle_command("/reset")
            self.repl.handle_command(f"/load {path}")
        self.assertEqual(self.repl.runner.namespace["b"], 21)

    @patch("lucid.main.console")
    def test_load_missing_script(self, mock_console):
        """Test /load reports a missing file"""
        self.assertFalse(self.repl.run_script(Path("/tmp/does_not_exist_lucid_test.py")))
        self.assertIn("No script found", self.printed(mock_console))

    @patch("lucid.main.save_config", return_value=True)
    @patch("lucid.main.load_config", return_value={})
    @patch("lucid.main.console")
    def test_config_set(self, mock_console, _mock_load, mock_save):
        """Test /config set saves the new value"""
        self.repl.handle_command("/config set number_radix 16")
        mock_save.assert_called_once_with({"NUMBER_RADIX": "16"})

    @patch("lucid.main.save_config", return_value=True)
    @patch("lucid.main.load_config", return_value={})
    @patch("lucid.main.disable_tracing")
    @patch("lucid.main.enable_tracing", side_effect=["first", "second"])
    @patch("lucid.main.console")
    def test_config_set_trace_file(self, mock_console, mock_enable, mock_disable, _load, _save):
        """Test changing TRACE_FILE closes the previous trace file"""
        self.repl.handle_command("/config set TRACE_FILE /tmp/one.log")
        mock_disable.assert_not_called()
        self.repl.handle_command("/config set TRACE_FILE /tmp/two.log")
        mock_disable.assert_called_once_with("first")
        mock_enable.assert_called_with("/tmp/two.log")
        self.assertEqual(self.repl.trace_handler, "second")

    @patch("lucid.main.console")
    def test_load_runs_through_the_session(self, mock_console):
        """Test /load runs the script with the session runner"""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "script.py"
            path.write_text("answer = 6 * 7\nanswer\n", encoding="utf-8")
            with patch.object(self.repl.runner, "load", wraps=self.repl.runner.load) as mock_load:
                self.assertTrue(self.repl.run_script(path))
        mock_load.assert_called_once_with(path)
        self.assertIn("42", self.printed(mock_console))

    @patch("lucid.main.save_config")
    @patch("lucid.main.console")
    def test_config_set_unknown_key(self, mock_console, mock_save):
        """Test /config set rejects unknown keys"""
        self.repl.handle_command("/config set COLOR red")
        mock_save.assert_not_called()
        self.assertIn("Unknown setting: COLOR", self.printed(mock_console))

    @patch("builtins.input", side_effect=["items = [1,", "2]"])
    def test_read_continuation_lines(self, _mock_input):
        """Test incomplete code asks for more lines"""
        self.assertEqual(self.repl.read_submission(), "items = [1,\n2]")

    @patch("builtins.input", side_effect=["/help"])
    def test_commands_are_single_lines(self, _mock_input):
        """Test command lines are never continued"""
        self.assertEqual(self.repl.read_submission(), "/help")

    @patch("builtins.input", side_effect=EOFError)
    def test_end_of_input(self, _mock_input):
        """Test Ctrl+D ends input"""
        self.assertIsNone(self.repl.read_submission())

    @patch("lucid.main.console")
    @patch("builtins.input", side_effect=["x = 6", "x * 7", "/quit"])
    def test_run_loop(self, _mock_input, mock_console):
        """Test the loop evaluates input until /quit"""
        self.repl.run()
        self.assertIn("42", self.printed(mock_console))
        self.assertIn("Goodbye", self.printed(mock_console))


class TestIntegration(unittest.TestCase):
    """Integration tests for the full save/load workflow"""

    def test_script_roundtrip_recreates_state(self):
        """Test that a saved session can be replayed into a new one"""
        runner = ScriptRunner()
        runner.evaluate("import math")
        runner.evaluate("radius = 2")
        runner.evaluate("area = round(math.pi * radius ** 2, 2)")

        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "session.py"
            self.assertTrue(save_script(runner.submissions, path))

            replayed = ScriptRunner()
            replayed.load(path)

        self.assertEqual(replayed.namespace["area"], 12.57)

    def test_default_script_location(self):
        """Test the default script lives next to the config file"""
        overrides = ("LUCID_DIR", "LUCID_CONFIG_FILE", "LUCID_SCRIPT_FILE")
        if not any(os.getenv(name) for name in overrides):
            self.assertEqual(SCRIPT_FILE.parent, CONFIG_FILE.parent)
