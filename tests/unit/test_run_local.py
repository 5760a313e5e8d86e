"""Unit tests for run_local module."""

import unittest
from unittest.mock import call, patch

import run_local


class TestRunLocal(unittest.TestCase):
    """Tests for the development server script."""

    @patch("run_local.execute_from_command_line")
    def test_main_migrates_then_runs_server(self, mock_execute):
        with patch("run_local.sys.argv", ["run_local.py", "8001"]):
            run_local.main()

        self.assertEqual(
            mock_execute.call_args_list,
            [
                call(["run_local.py", "migrate", "--noinput"]),
                call(["run_local.py", "runserver", "8001"]),
            ],
        )
