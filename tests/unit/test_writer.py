# tests/unit/test_writer.py
"""Unit tests for file block extraction and manifestation."""

from pathlib import Path
from unittest.mock import patch

from devscript.manifest.writer import (
    FileBlock,
    apply_changes,
    extract_file_blocks,
    write_block,
)


# ---------------------------------------------------------------------------
# extract_file_blocks
# ---------------------------------------------------------------------------

class TestExtractFileBlocks:
    def test_unterminated_block_ignored(self):
        blocks = extract_file_blocks('<file path="a/b.txt">hello</file><file path="bad">')
        assert blocks == [FileBlock(path="a/b.txt", body="hello")]

    def test_body_and_path_are_trimmed(self):
        blocks = extract_file_blocks('<file path=" src/x.py ">\n\n  code()\n\n</file>')
        assert blocks == [FileBlock(path="src/x.py", body="code()")]

    def test_single_quotes_and_case(self):
        blocks = extract_file_blocks("<FILE Path='x.md'>body</File>")
        assert blocks == [FileBlock(path="x.md", body="body")]

    def test_commentary_ignored_and_order_kept(self):
        text = (
            "Here are the changes.\n"
            '<file path="one.txt">1</file>\n'
            "Some explanation in between.\n"
            '<file path="two.txt">2</file>\n'
            "Done."
        )
        assert [b.path for b in extract_file_blocks(text)] == ["one.txt", "two.txt"]

    def test_empty_path_or_body_skipped(self):
        text = '<file path="">x</file><file path="empty.txt">   </file><file path="ok.txt">y</file>'
        assert extract_file_blocks(text) == [FileBlock(path="ok.txt", body="y")]

    def test_first_closing_tag_ends_body(self):
        blocks = extract_file_blocks('<file path="a">one</file>two</file>')
        assert blocks == [FileBlock(path="a", body="one")]

    def test_unterminated_block_before_valid_one(self):
        blocks = extract_file_blocks('<file path="bad">never closed\n<file path="good.txt">hello</file>')
        assert blocks == [FileBlock(path="good.txt", body="hello")]

    def test_no_blocks(self):
        assert extract_file_blocks("```python\nprint(1)\n```") == []


# ---------------------------------------------------------------------------
# write_block / apply_changes
# ---------------------------------------------------------------------------

class TestApplyChanges:
    def test_writes_nested_file(self, tmp_path):
        results = apply_changes('<file path="a/b.txt">hello</file><file path="bad">', tmp_path)

        assert len(results) == 1
        assert results[0].success
        assert (tmp_path / "a" / "b.txt").read_text(encoding="utf-8") == "hello"

    def test_overwrites_existing(self, tmp_path):
        (tmp_path / "x.txt").write_text("old", encoding="utf-8")

        apply_changes('<file path="x.txt">new</file>', tmp_path)

        assert (tmp_path / "x.txt").read_text(encoding="utf-8") == "new"

    def test_unicode_content(self, tmp_path):
        apply_changes('<file path="u.txt">héllo ✓</file>', tmp_path)
        assert (tmp_path / "u.txt").read_text(encoding="utf-8") == "héllo ✓"

    def test_valid_and_malformed_counts(self, tmp_path):
        text = (
            '<file path="1.txt">a</file>'
            '<file path="2.txt">b</file>'
            '<file path="">nopath</file>'
            '<file path="3.txt">   </file>'
            '<file path="4.txt">never closed'
        )

        results = apply_changes(text, tmp_path)

        assert [r.path for r in results] == ["1.txt", "2.txt"]
        assert all(r.success for r in results)

    def test_unterminated_block_first_does_not_swallow_next(self, tmp_path):
        text = (
            '<file path="broken.txt">never closed\n'
            '<file path="one.txt">1</file>'
            '<file path="two.txt">2</file>'
        )

        results = apply_changes(text, tmp_path)

        assert [r.path for r in results] == ["one.txt", "two.txt"]
        assert sorted(p.name for p in tmp_path.iterdir()) == ["one.txt", "two.txt"]
        assert (tmp_path / "one.txt").read_text(encoding="utf-8") == "1"

    def test_failure_isolated(self, tmp_path):
        # A regular file where a directory is needed makes mkdir fail
        (tmp_path / "blocker").write_text("", encoding="utf-8")
        text = (
            '<file path="first.txt">1</file>'
            '<file path="blocker/inner.txt">2</file>'
            '<file path="third.txt">3</file>'
        )

        results = apply_changes(text, tmp_path)

        assert [r.success for r in results] == [True, False, True]
        assert results[1].error_message
        assert (tmp_path / "third.txt").read_text(encoding="utf-8") == "3"

    def test_path_escape_rejected(self, tmp_path):
        base = tmp_path / "project"
        base.mkdir()

        results = apply_changes('<file path="../outside.txt">x</file>', base)

        assert not results[0].success
        assert "escapes" in results[0].error_message
        assert not (tmp_path / "outside.txt").exists()

    def test_write_error_reported(self, tmp_path):
        with patch.object(Path, "write_text", side_effect=PermissionError("read-only")):
            result = write_block(FileBlock(path="x.txt", body="y"), tmp_path)

        assert not result.success
        assert "read-only" in result.error_message

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        apply_changes('<file path="here.txt">ok</file>')

        assert (tmp_path / "here.txt").read_text(encoding="utf-8") == "ok"

    def test_no_blocks_no_results(self, tmp_path):
        assert apply_changes("Nothing to do.", tmp_path) == []
