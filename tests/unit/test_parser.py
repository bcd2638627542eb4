# tests/unit/test_parser.py
"""Unit tests for the .dev script parser."""

from devscript.script.parser import parse_script
from devscript.script.types import ScriptSpec


class TestScalarTags:
    """Tests for @role, @vibe, @format and @limit."""

    def test_role_and_vibe(self):
        spec = parse_script("@role Staff Engineer\n@vibe Terse")
        assert spec.role == "Staff Engineer"
        assert spec.vibe == "Terse"

    def test_last_value_wins_within_file(self):
        spec = parse_script("@role First\n@role Second")
        assert spec.role == "Second"

    def test_format_and_limit(self):
        spec = parse_script("@format Use JSON only\n@limit Touch only src/")
        assert spec.response_format_override == "Use JSON only"
        assert spec.limitation == "Touch only src/"

    def test_tag_is_case_insensitive(self):
        spec = parse_script("@ROLE Architect")
        assert spec.role == "Architect"

    def test_remainder_is_trimmed(self):
        spec = parse_script("   @role    Architect   ")
        assert spec.role == "Architect"


class TestListTags:
    """Tests for list-valued tags."""

    def test_values_accumulate_in_order(self):
        spec = parse_script("@rule one\n@rule two\n@not eval\n@use src\n@use README.md")
        assert spec.rules == ["one", "two"]
        assert spec.negative_constraints == ["eval"]
        assert spec.context_references == ["src", "README.md"]

    def test_guard_test_and_tech(self):
        spec = parse_script("@guard Only use listed APIs\n@test returns 42\n@tech Python")
        assert spec.guards == ["Only use listed APIs"]
        assert spec.test_assertions == ["returns 42"]
        assert spec.tech_stack == ["Python"]

    def test_empty_list_tag_is_ignored(self):
        spec = parse_script("@rule\n@rule   \n@use")
        assert spec.rules == []
        assert spec.context_references == []

    def test_duplicates_are_kept(self):
        spec = parse_script("@rule same\n@rule same")
        assert spec.rules == ["same", "same"]


class TestTaskCapture:
    """Tests for multi-line @task capture."""

    def test_capture_stops_at_next_tag(self):
        spec = parse_script("@task\nline1\nline2\n@rule x")
        assert spec.task == "line1\nline2"
        assert spec.rules == ["x"]

    def test_task_runs_to_end_of_file(self):
        spec = parse_script("@role R\n@task\nDo the thing\n")
        assert spec.task == "Do the thing"

    def test_same_line_remainder_is_first_line(self):
        spec = parse_script("@task Refactor auth\nKeep the API stable")
        assert spec.task == "Refactor auth\nKeep the API stable"

    def test_lines_kept_verbatim(self):
        spec = parse_script("@task\n  indented line\nplain line")
        assert spec.task == "  indented line\nplain line"

    def test_internal_blank_lines_preserved(self):
        spec = parse_script("@task\n\nfirst\n\nsecond\n\n@rule r")
        assert spec.task == "first\n\nsecond"

    def test_indented_tag_ends_capture(self):
        spec = parse_script("@task\nbody\n   @not globals")
        assert spec.task == "body"
        assert spec.negative_constraints == ["globals"]

    def test_multiple_task_tags_stack(self):
        spec = parse_script("@task first\n@rule r\n@task second")
        assert spec.task == "first\nsecond"

    def test_empty_task_stays_empty(self):
        spec = parse_script("@task\n\n@rule r")
        assert spec.task == ""


class TestIgnoredInput:
    """Tests for lines the parser skips."""

    def test_empty_text(self):
        assert parse_script("") == ScriptSpec()

    def test_unknown_tags_and_plain_lines(self):
        spec = parse_script("just prose\n@unknown value\n# comment\n@role R")
        assert spec == ScriptSpec(role="R")

    def test_crlf_line_endings(self):
        spec = parse_script("@role R\r\n@task\r\nbody\r\n@rule x\r\n")
        assert spec.role == "R"
        assert spec.task == "body"
        assert spec.rules == ["x"]
