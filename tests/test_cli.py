"""
Tests for the command loop and CLI entry point
"""

import io
import os
import pytest
from unittest.mock import patch

from click.testing import CliRunner
from rich.console import Console

from bugtracker.cli import cli, CommandLoop, LoopState
from bugtracker.config import DB_PATH
from bugtracker.models import BugStatus
from bugtracker.store import BugStore


MENU_LINE = "1. Add Bug"


class TestCommandLoop:
    """Tests for CommandLoop dispatch."""

    @pytest.fixture
    def store(self, tmp_path):
        store = BugStore(tmp_path / "bugs.db").open()
        store.ensure_schema()
        yield store
        store.close()

    @pytest.fixture
    def loop(self, store):
        return CommandLoop(
            store,
            console=Console(file=io.StringIO(), width=120),
            err_console=Console(file=io.StringIO(), width=120),
        )

    def output_of(self, loop):
        return loop.console.file.getvalue()

    def test_initial_state(self, loop):
        assert loop.state == LoopState.MENU_DISPLAY

    def test_exit_choice_terminates(self, loop):
        assert loop.dispatch("5") == LoopState.TERMINATED

    @pytest.mark.parametrize("choice", ["6", "0", "", "exit", " 5", "5 "])
    def test_invalid_choice_returns_to_menu(self, loop, choice):
        assert loop.dispatch(choice) == LoopState.MENU_DISPLAY
        assert "Invalid option." in self.output_of(loop)

    def test_add_bug(self, loop, store):
        with patch("builtins.input", side_effect=["Crash", "Crashes on save", "high"]):
            assert loop.dispatch("1") == LoopState.MENU_DISPLAY

        bugs = list(store.list_all())
        assert len(bugs) == 1
        assert bugs[0].title == "Crash"
        assert bugs[0].priority.value == "High"
        assert "Bug added." in self.output_of(loop)

    def test_add_bug_reprompts_invalid_fields(self, loop, store):
        inputs = ["", "Crash", "D", "urgent", "Low"]
        with patch("builtins.input", side_effect=inputs):
            loop.dispatch("1")

        output = self.output_of(loop)
        assert "Invalid title." in output
        assert "Invalid priority." in output
        assert store.count() == 1

    def test_list_empty(self, loop):
        loop.dispatch("2")

        assert "No bugs found." in self.output_of(loop)

    def test_list_bugs(self, loop, store):
        store.insert("Crash", "Boom", "Low")

        loop.dispatch("2")

        output = self.output_of(loop)
        assert "Crash" in output
        assert "Boom" in output
        assert "Open" in output

    @pytest.mark.parametrize("title", ["[/oops]", "[bold]Crash[/bold]", "[red"])
    def test_list_shows_bracketed_text_verbatim(self, loop, store, title):
        store.insert(title, "see [link=x]here[/link]", "Low")

        assert loop.dispatch("2") == LoopState.MENU_DISPLAY

        output = self.output_of(loop)
        assert title in output
        assert "[link=x]here[/link]" in output

    def test_list_rows_from_other_clients(self, loop, store):
        store._conn.execute("INSERT INTO bugs (Title, Description) VALUES ('T', 'D')")
        store._conn.execute(
            "INSERT INTO bugs (Title, Description, Status, Priority) VALUES ('U', 'E', 'closed', 'urgent')"
        )
        store._conn.commit()

        assert loop.dispatch("2") == LoopState.MENU_DISPLAY

        output = self.output_of(loop)
        assert "closed" in output
        assert "urgent" in output

    def test_update_bug(self, loop, store):
        bug_id = store.insert("T", "D", "Low")

        with patch("builtins.input", side_effect=[str(bug_id), "resolved"]):
            loop.dispatch("3")

        assert store.get(bug_id).status == BugStatus.RESOLVED
        assert "Bug updated." in self.output_of(loop)

    def test_update_absent_bug(self, loop, store):
        with patch("builtins.input", side_effect=["999"]) as mock_input:
            assert loop.dispatch("3") == LoopState.MENU_DISPLAY

        # Status is never asked for
        assert mock_input.call_count == 1
        assert "Error: Bug with ID 999 does not exist." in self.output_of(loop)

    @pytest.mark.parametrize("choice", ["3", "4"])
    def test_oversized_id_reports_not_found(self, loop, store, choice):
        store.insert("T", "D", "Low")

        with patch("builtins.input", side_effect=["99999999999999999999"]):
            assert loop.dispatch(choice) == LoopState.MENU_DISPLAY

        assert "Error: Bug with ID 99999999999999999999 does not exist." in self.output_of(loop)
        assert store.count() == 1

    def test_delete_bug(self, loop, store):
        bug_id = store.insert("T", "D", "Low")

        with patch("builtins.input", side_effect=["abc", str(bug_id)]):
            loop.dispatch("4")

        output = self.output_of(loop)
        assert "Invalid ID. Please enter a positive number." in output
        assert "Bug deleted." in output
        assert not store.exists(bug_id)

    def test_delete_absent_bug(self, loop):
        with patch("builtins.input", side_effect=["7"]):
            loop.dispatch("4")

        assert "Error: Bug with ID 7 does not exist." in self.output_of(loop)

    def test_storage_error_reported_and_loop_continues(self, loop, store):
        store._conn.execute("DROP TABLE bugs")

        assert loop.dispatch("2") == LoopState.MENU_DISPLAY
        assert "no such table" in loop.err_console.file.getvalue()

    def test_eof_during_prompt_terminates(self, loop):
        with patch("builtins.input", side_effect=EOFError):
            assert loop.dispatch("1") == LoopState.TERMINATED

    def test_run_until_exit(self, loop):
        with patch("builtins.input", side_effect=["6", "5"]):
            loop.run()

        output = self.output_of(loop)
        assert loop.state == LoopState.TERMINATED
        assert output.count(MENU_LINE) == 2
        assert "Invalid option." in output

    def test_run_stops_on_eof(self, loop):
        with patch("builtins.input", side_effect=["2", EOFError]):
            loop.run()

        assert loop.state == LoopState.TERMINATED

    def test_run_survives_keyboard_interrupt(self, loop):
        with patch("builtins.input", side_effect=[KeyboardInterrupt, "5"]):
            loop.run()

        output = self.output_of(loop)
        assert "Interrupted" in output
        assert output.count(MENU_LINE) == 2


class TestCli:
    """Tests for the click entry point."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    def test_invalid_option_redisplays_menu(self, runner, tmp_path):
        result = runner.invoke(cli, ["--db", str(tmp_path / "bugs.db")], input="6\n5\n")

        assert result.exit_code == 0
        assert "Invalid option." in result.output
        assert result.output.count(MENU_LINE) == 2

    def test_add_and_list(self, runner, tmp_path):
        db_path = tmp_path / "bugs.db"

        result = runner.invoke(
            cli, ["--db", str(db_path)], input="1\nCrash\nBoom\nmedium\n2\n5\n"
        )

        assert result.exit_code == 0
        assert "Bug added." in result.output
        assert "Crash" in result.output
        assert "Medium" in result.output

        with BugStore(db_path) as store:
            assert store.count() == 1

    def test_data_persists_between_runs(self, runner, tmp_path):
        db_path = str(tmp_path / "bugs.db")

        runner.invoke(cli, ["--db", db_path], input="1\nT\nD\nLow\n5\n")
        result = runner.invoke(cli, ["--db", db_path], input="3\n1\nIn Progress\n2\n5\n")

        assert result.exit_code == 0
        assert "Bug updated." in result.output
        assert "In Progress" in result.output

    def test_end_of_input_exits_cleanly(self, runner, tmp_path):
        result = runner.invoke(cli, ["--db", str(tmp_path / "bugs.db")], input="2\n")

        assert result.exit_code == 0

    def test_unopenable_database_exits_1(self, runner, tmp_path):
        result = runner.invoke(cli, ["--db", str(tmp_path / "missing" / "bugs.db")], input="5\n")

        assert result.exit_code == 1
        assert MENU_LINE not in result.output

    def test_default_db_in_working_directory(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, [], input="5\n")

            assert result.exit_code == 0
            assert os.path.exists(DB_PATH)

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
