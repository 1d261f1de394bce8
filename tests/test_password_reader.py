"""
Tests for the raw-mode password reader

The terminal is never touched: os, termios and tty are patched by the
`fake_tty` fixture.
"""
import io
import termios
from unittest.mock import call

import pytest

from domain.errors import ModeSwitchError, TerminalReadError, TerminalUnavailableError
from infrastructure.terminal.password_reader import RawTerminal, read_password


def _names(calls):
    return [c[0] for c in calls.mock_calls]


class TestReadPassword:

    def test_reads_until_carriage_return(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"s", b"3", b"c", b"\r", b"x"]
        out = io.StringIO()

        assert read_password(stream=out) == "s3c"
        assert out.getvalue() == "Enter your password: \n"

    def test_reads_until_newline(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"a", b"b", b"\n"]

        assert read_password(stream=io.StringIO()) == "ab"

    def test_multibyte_characters(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"\xc3", b"\xb1", b"o", b"\r"]

        assert read_password(stream=io.StringIO()) == "ño"

    def test_terminal_restored_and_closed_on_success(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"a", b"\r"]

        read_password(stream=io.StringIO())

        mock_termios.tcsetattr.assert_called_once_with(7, termios.TCSADRAIN, ["saved-mode"])
        mock_os.close.assert_called_once_with(7)
        assert _names(calls)[-2:] == ["restore", "close"]

    def test_read_failure_restores_before_error(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"a", b"b", OSError("EIO")]

        with pytest.raises(TerminalReadError) as exc_info:
            read_password(stream=io.StringIO())

        assert isinstance(exc_info.value.__cause__, OSError)
        assert _names(calls) == ["open", "setraw", "read", "read", "read", "restore", "close"]

    def test_eof_is_read_failure(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"a", b""]

        with pytest.raises(TerminalReadError):
            read_password(stream=io.StringIO())
        assert "restore" in _names(calls)

    def test_ctrl_c_aborts_and_restores(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = [b"a", b"\x03"]

        with pytest.raises(KeyboardInterrupt):
            read_password(stream=io.StringIO())
        assert _names(calls)[-2:] == ["restore", "close"]


class TestRawTerminal:

    def test_unavailable_terminal(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.open.side_effect = OSError("No such device")

        with pytest.raises(TerminalUnavailableError):
            with RawTerminal("/dev/tty"):
                pass
        mock_os.close.assert_not_called()

    def test_raw_mode_failure_closes_handle(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_tty.setraw.side_effect = termios.error(25, "Inappropriate ioctl")

        with pytest.raises(ModeSwitchError):
            with RawTerminal("/dev/tty"):
                pass
        mock_os.close.assert_called_once_with(7)
        mock_termios.tcsetattr.assert_not_called()

    def test_restore_failure_still_closes_and_keeps_prior_error(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_os.read.side_effect = OSError("EIO")
        mock_termios.tcsetattr.side_effect = termios.error(5, "restore failed")

        with pytest.raises(ModeSwitchError) as exc_info:
            with RawTerminal("/dev/tty") as term:
                term.read_char()

        err = exc_info.value
        assert isinstance(err.__cause__, TerminalReadError)
        assert isinstance(err.__context__, termios.error)
        mock_os.close.assert_called_once_with(7)

    def test_restore_failure_on_success_path(self, fake_tty):
        calls, mock_os, mock_termios, mock_tty = fake_tty
        mock_termios.tcsetattr.side_effect = termios.error(5, "restore failed")

        with pytest.raises(ModeSwitchError):
            with RawTerminal("/dev/tty"):
                pass
        assert mock_os.close.call_args == call(7)
