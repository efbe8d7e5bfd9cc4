import io
import os
from unittest import mock

from fieldlog.terminal import check_if_terminal


class _FakeStream:
    def __init__(self, fd):
        self._fd = fd

    def fileno(self):
        return self._fd


def test_string_buffer_is_not_terminal():
    assert check_if_terminal(io.StringIO()) is False


def test_object_without_fileno_is_not_terminal():
    assert check_if_terminal(object()) is False


def test_regular_file_is_not_terminal(tmp_path):
    with open(tmp_path / "out.log", "w") as handle:
        assert check_if_terminal(handle) is False


def test_closed_file_is_not_terminal(tmp_path):
    handle = open(tmp_path / "out.log", "w")
    handle.close()
    assert check_if_terminal(handle) is False


def test_pipe_is_not_terminal():
    read_fd, write_fd = os.pipe()
    with open(read_fd, "rb") as reader, open(write_fd, "wb") as writer:
        assert check_if_terminal(writer) is False
        assert check_if_terminal(reader) is False


def test_negative_descriptor_is_not_terminal():
    assert check_if_terminal(_FakeStream(-1)) is False


def test_tty_descriptor_is_terminal():
    with mock.patch("os.isatty", return_value=True) as isatty:
        assert check_if_terminal(_FakeStream(7)) is True
    isatty.assert_called_once_with(7)


def test_isatty_error_is_not_terminal():
    with mock.patch("os.isatty", side_effect=OSError("bad fd")):
        assert check_if_terminal(_FakeStream(3)) is False


def test_platform_without_terminals():
    with mock.patch("sys.platform", "wasi"), mock.patch("os.isatty", return_value=True):
        assert check_if_terminal(_FakeStream(1)) is False