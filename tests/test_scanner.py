"""
Unit tests for the path sources.
Verifies directory walking, path-list mode, symlink handling and input validation.
"""
import os

import pytest

from redup.core.errors import InputError
from redup.core.scanner import DirectoryPathSource, PathListSource, discover
from conftest import running_as_root


class TestDirectoryPathSource:
    """Test recursive discovery of candidate files."""

    def test_yields_every_file_recursively(self, test_files, temp_dir):
        """All regular files, including zero-byte ones and subdirectory files, are candidates."""
        paths = list(DirectoryPathSource(str(temp_dir)))

        assert sorted(paths) == sorted(str(p) for p in test_files.values())

    def test_each_path_emitted_once(self, test_files, temp_dir):
        paths = list(DirectoryPathSource(str(temp_dir)))
        assert len(paths) == len(set(paths))

    def test_directories_are_not_candidates(self, temp_dir):
        (temp_dir / "only_dir").mkdir()
        (temp_dir / "only_dir" / "nested").mkdir()

        assert list(DirectoryPathSource(str(temp_dir))) == []

    def test_is_lazy(self, test_files, temp_dir):
        """Source produces paths on demand instead of building a list up front."""
        iterator = iter(DirectoryPathSource(str(temp_dir)))
        first = next(iterator)
        assert os.path.isfile(first)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinked_directory_not_traversed(self, temp_dir):
        """A link pointing back at the root must not cause a cycle or duplicate candidates."""
        (temp_dir / "file.txt").write_bytes(b"data")
        os.symlink(str(temp_dir), str(temp_dir / "loop"), target_is_directory=True)

        paths = list(DirectoryPathSource(str(temp_dir)))

        assert paths == [str(temp_dir / "file.txt")]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinked_file_is_candidate(self, temp_dir):
        target = temp_dir / "target.txt"
        target.write_bytes(b"data")
        os.symlink(str(target), str(temp_dir / "link.txt"))

        paths = sorted(DirectoryPathSource(str(temp_dir)))

        assert paths == sorted([str(target), str(temp_dir / "link.txt")])

    @pytest.mark.skipif(running_as_root(), reason="root ignores directory permissions")
    def test_unreadable_directory_skipped_and_counted(self, temp_dir):
        """A locked directory yields nothing, siblings are still walked."""
        locked = temp_dir / "locked"
        locked.mkdir()
        (locked / "hidden.txt").write_bytes(b"secret")
        sibling = temp_dir / "open"
        sibling.mkdir()
        (sibling / "visible.txt").write_bytes(b"visible")

        os.chmod(locked, 0)
        try:
            source = DirectoryPathSource(str(temp_dir))
            paths = list(source)
        finally:
            os.chmod(locked, 0o755)

        assert paths == [str(sibling / "visible.txt")]
        assert source.skipped_dirs == 1


class TestPathListSource:
    """Test stdin-style path lists."""

    def test_supplied_order_and_blank_lines(self):
        lines = ["/no/such/x\n", "\n", "   \n", "/no/such/y\n"]

        assert list(PathListSource(lines)) == ["/no/such/x", "/no/such/y"]

    def test_no_existence_check(self, temp_dir):
        """Missing paths pass through; the hasher reports them later."""
        missing = str(temp_dir / "does_not_exist.txt")

        assert list(PathListSource([missing])) == [missing]

    def test_strips_windows_line_endings(self):
        assert list(PathListSource(["/no/such/x\r\n"])) == ["/no/such/x"]

    def test_lines_passed_through_without_memory_of_earlier_paths(self):
        """The list is streamed; a repeated line is the caller's choice."""
        assert list(PathListSource(["/no/such/x", "/no/such/x"])) == ["/no/such/x", "/no/such/x"]

    def test_byte_lines_decoded_with_filesystem_encoding(self):
        raw = b"/data/\xff.bin\n"

        paths = list(PathListSource([raw]))

        assert paths == [os.fsdecode(b"/data/\xff.bin")]
        assert os.fsencode(paths[0]) == b"/data/\xff.bin"

    def test_directory_line_is_expanded(self, test_files, temp_dir):
        """A listed directory contributes all of its files."""
        paths = list(PathListSource([str(temp_dir / "subdir")]))

        assert paths == [str(test_files["big_copy"])]


class TestDiscover:
    """Test input-mode validation."""

    def test_directory_mode(self, temp_dir):
        assert isinstance(discover(root_dir=str(temp_dir)), DirectoryPathSource)

    def test_list_mode(self):
        assert isinstance(discover(lines=["/no/such/x"]), PathListSource)

    def test_missing_root_raises_input_error(self, temp_dir):
        with pytest.raises(InputError, match="does not exist"):
            discover(root_dir=str(temp_dir / "nope"))

    def test_file_root_raises_input_error(self, temp_dir):
        file_path = temp_dir / "file.txt"
        file_path.write_bytes(b"x")

        with pytest.raises(InputError, match="Not a directory"):
            discover(root_dir=str(file_path))

    def test_neither_mode_raises_input_error(self):
        with pytest.raises(InputError):
            discover()

    def test_both_modes_raise_input_error(self, temp_dir):
        with pytest.raises(InputError):
            discover(root_dir=str(temp_dir), lines=[])
