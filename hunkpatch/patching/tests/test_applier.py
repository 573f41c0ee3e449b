"""Unit tests for hunk application."""

import difflib

import pytest

from hunkpatch.patching.applier import apply_hunks, detect_line_terminator
from hunkpatch.patching.errors import ApplyError, ContentMismatchError, PatchErrorType
from hunkpatch.patching.parser import parse_patch


def _hunks(patch_txt: str):
    return parse_patch(patch_txt)[0].hunks


def _diff(original: str, target: str) -> str:
    return "".join(
        difflib.unified_diff(
            original.splitlines(keepends=True),
            target.splitlines(keepends=True),
            "a/file.txt",
            "b/file.txt",
        )
    )


MODIFY_PATCH = """\
--- a/file.txt
+++ b/file.txt
@@ -1,2 +1,2 @@
 line1
-line2
+line2-modified
"""

TWENTY_LINES = "".join(f"line{i}\n" for i in range(1, 21))

# hunk 1 grows the file by 3 lines; hunk 2 still uses pre-edit numbering
OFFSET_PATCH = """\
--- a/file.txt
+++ b/file.txt
@@ -2,1 +2,4 @@
-line2
+a
+b
+c
+d
@@ -15,3 +18,3 @@
 line15
-line16
+sixteen
 line17
"""


class TestApplyHunks:
    """Tests for apply_hunks on matching content."""

    def test_modify_line(self):
        """A single replaced line."""
        result = apply_hunks("line1\nline2\n", _hunks(MODIFY_PATCH))

        assert result == "line1\nline2-modified\n"

    def test_offset_compensation_between_hunks(self):
        """Later hunks are shifted by the growth of earlier ones."""
        result = apply_hunks(TWENTY_LINES, _hunks(OFFSET_PATCH), fuzz=0)

        lines = result.splitlines()
        assert lines[1:5] == ["a", "b", "c", "d"]
        assert lines[17] == "line15"
        assert lines[18] == "sixteen"
        assert lines[19] == "line17"
        assert len(lines) == 23

    def test_fuzzy_match_within_radius(self):
        """A hunk that drifted two lines still applies."""
        patch = "--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n a\n-b\n+B\n"

        result = apply_hunks("x\ny\na\nb\n", _hunks(patch), fuzz=3)

        assert result == "x\ny\na\nB\n"

    def test_fuzzy_match_prefers_forward_on_tie(self):
        """Equal distance candidates resolve forward first."""
        patch = "--- a/f\n+++ b/f\n@@ -2,2 +2,2 @@\n a\n-b\n+X\n"

        result = apply_hunks("a\nb\na\nb\na\nb\n", _hunks(patch), fuzz=1)

        assert result == "a\nb\na\nX\na\nb\n"

    def test_hunks_do_not_reapply_over_earlier_output(self):
        """A second identical hunk must land after the first one."""
        patch = (
            "--- a/f\n+++ b/f\n"
            "@@ -1,2 +1,2 @@\n a\n-b\n+B\n"
            "@@ -1,2 +1,2 @@\n a\n-b\n+B\n"
        )

        result = apply_hunks("a\nb\na\nb\n", _hunks(patch), fuzz=3)

        assert result == "a\nB\na\nB\n"

    def test_create_from_empty(self):
        """A -0,0 hunk fills an empty file."""
        patch = "--- /dev/null\n+++ b/new.py\n@@ -0,0 +1,2 @@\n+def f():\n+    pass\n"

        assert apply_hunks("", _hunks(patch)) == "def f():\n    pass\n"

    def test_delete_everything(self):
        """Removing every line leaves empty content."""
        patch = "--- a/f\n+++ /dev/null\n@@ -1,2 +0,0 @@\n-a\n-b\n"

        assert apply_hunks("a\nb\n", _hunks(patch)) == ""

    def test_insert_after_line(self):
        """A zero-length old range inserts after the named line."""
        patch = "--- a/f\n+++ b/f\n@@ -2,0 +3,1 @@\n+inserted\n"

        assert apply_hunks("a\nb\nc\n", _hunks(patch)) == "a\nb\ninserted\nc\n"

    def test_crlf_terminators_preserved(self):
        """CRLF files stay CRLF."""
        patch = "--- a/f\n+++ b/f\n@@ -2 +2 @@\n-b\n+B\n"

        assert apply_hunks("a\r\nb\r\n", _hunks(patch)) == "a\r\nB\r\n"

    def test_negative_fuzz_rejected(self):
        """fuzz must not be negative."""
        with pytest.raises(ValueError):
            apply_hunks("line1\nline2\n", _hunks(MODIFY_PATCH), fuzz=-1)


class TestTrailingNewline:
    """Tests for '\\ No newline at end of file' handling."""

    def test_change_last_line_without_newline(self):
        """Both sides lack a final newline."""
        patch = (
            "--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n keep\n-old\n"
            "\\ No newline at end of file\n+new\n\\ No newline at end of file\n"
        )

        assert apply_hunks("keep\nold", _hunks(patch)) == "keep\nnew"

    def test_add_final_newline(self):
        """Old side flagged, new side not: a newline is added."""
        patch = "--- a/f\n+++ b/f\n@@ -1 +1 @@\n-old\n\\ No newline at end of file\n+old\n"

        assert apply_hunks("old", _hunks(patch)) == "old\n"

    def test_remove_final_newline(self):
        """New side flagged: the result has no final newline."""
        patch = "--- a/f\n+++ b/f\n@@ -1 +1 @@\n-old\n+old\n\\ No newline at end of file\n"

        assert apply_hunks("old\n", _hunks(patch)) == "old"

    def test_untouched_end_keeps_missing_newline(self):
        """Hunks away from the end leave the final line alone."""
        patch = "--- a/f\n+++ b/f\n@@ -1 +1 @@\n-a\n+A\n"

        assert apply_hunks("a\nb\nc", _hunks(patch)) == "A\nb\nc"

    def test_flagged_line_must_be_at_end_of_file(self):
        """A flagged old line cannot match a line that has a newline."""
        patch = "--- a/f\n+++ b/f\n@@ -1 +1 @@\n-old\n\\ No newline at end of file\n+old\n"

        with pytest.raises(ContentMismatchError):
            apply_hunks("old\n", _hunks(patch))


class TestApplyHunksMismatch:
    """Tests for hunks that cannot be located."""

    def test_context_mismatch(self):
        """Lines that do not exist in the file fail the whole apply."""
        with pytest.raises(ContentMismatchError) as excinfo:
            apply_hunks("def bar():\n    return 42\n", _hunks(MODIFY_PATCH))

        error = excinfo.value
        assert isinstance(error, ApplyError)
        assert error.error_type == PatchErrorType.CONTENT_MISMATCH
        assert error.hunk_index == 1
        assert error.old_start == 1

    def test_drift_beyond_radius(self):
        """A drift larger than fuzz is not tolerated."""
        patch = "--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n a\n-b\n+B\n"

        with pytest.raises(ContentMismatchError):
            apply_hunks("x\ny\na\nb\n", _hunks(patch), fuzz=1)

    def test_second_hunk_failure_reports_its_index(self):
        """The error names the hunk that failed."""
        broken = TWENTY_LINES.replace("line16\n", "other\n")

        with pytest.raises(ContentMismatchError) as excinfo:
            apply_hunks(broken, _hunks(OFFSET_PATCH))

        assert excinfo.value.hunk_index == 2
        assert excinfo.value.old_start == 15
        assert excinfo.value.details["fuzz"] == 3

    def test_reapplying_is_rejected(self):
        """A patch applied twice fails the second time."""
        once = apply_hunks("line1\nline2\n", _hunks(MODIFY_PATCH))

        with pytest.raises(ContentMismatchError):
            apply_hunks(once, _hunks(MODIFY_PATCH))

    def test_reapplying_newline_fix_is_rejected(self):
        """Even a newline-only change is not applied twice."""
        patch = "--- a/f\n+++ b/f\n@@ -1 +1 @@\n-old\n\\ No newline at end of file\n+old\n"
        once = apply_hunks("old", _hunks(patch))

        with pytest.raises(ContentMismatchError):
            apply_hunks(once, _hunks(patch))


class TestRoundTrip:
    """Applying diff(original, target) to original yields target."""

    @pytest.mark.parametrize(
        "original,target",
        [
            ("a\nb\nc\n", "a\nB\nc\n"),
            ("", "new\nfile\n"),
            ("x\ny\n", ""),
            ("one\n", "zero\none\ntwo\n"),
            (
                "".join(f"line{i}\n" for i in range(1, 31)),
                "".join(
                    ("changed28\n" if i == 28 else f"line{i}\n")
                    + ("new-a\nnew-b\n" if i == 15 else "")
                    for i in range(1, 31)
                    if i != 5
                ),
            ),
        ],
    )
    def test_round_trip(self, original, target):
        patched = apply_hunks(original, parse_patch(_diff(original, target))[0].hunks)

        assert patched == target


class TestDetectLineTerminator:
    """Tests for detect_line_terminator."""

    def test_lf(self):
        assert detect_line_terminator("a\nb\n") == "\n"

    def test_crlf(self):
        assert detect_line_terminator("a\r\nb\r\n") == "\r\n"

    def test_default_for_single_line(self):
        assert detect_line_terminator("abc") == "\n"
