"""
Tests for main.py entry point.

Tests the command-line dispatch to the catalogue tool.
"""

import pytest
import sys
from unittest.mock import patch

# Import the main module
import main


class TestMain:
    """Test class for main.py entry point functionality."""

    def test_version_info(self):
        assert main.__version__ == "1.0.0"

    @patch('astracatalogue.cli.main.main')
    def test_catalogue_tool_forwards_arguments(self, mock_catalogue_main):
        test_args = ['main.py', 'catalogue', 'list', 'stars.dat', '--kind', 'Star']

        with patch.object(sys, 'argv', test_args):
            main.main()

        mock_catalogue_main.assert_called_once_with(['list', 'stars.dat', '--kind', 'Star'])

    def test_unknown_tool(self):
        with patch.object(sys, 'argv', ['main.py', 'planner']):
            with pytest.raises(SystemExit) as exc_info:
                main.main()
        assert exc_info.value.code == 2

    @patch('astracatalogue.cli.main.main', side_effect=KeyboardInterrupt)
    def test_keyboard_interrupt(self, mock_catalogue_main, capsys):
        with patch.object(sys, 'argv', ['main.py', 'catalogue', 'report', 'x.dat']):
            with pytest.raises(SystemExit) as exc_info:
                main.main()
        assert exc_info.value.code == 130
        assert "cancelled" in capsys.readouterr().err

    def test_version_flag(self, capsys):
        with patch.object(sys, 'argv', ['main.py', '--version']):
            with pytest.raises(SystemExit) as exc_info:
                main.main()
        assert exc_info.value.code == 0
        assert "AstraCatalogue 1.0.0" in capsys.readouterr().out
