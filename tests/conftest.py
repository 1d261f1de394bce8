"""
Shared test fixtures and configuration for pytest
"""
import os
import termios
from unittest.mock import MagicMock, patch

import pytest

from config.settings import Settings


@pytest.fixture
def settings():
    return Settings(
        IMAP_SERVER="",
        IMAP_USERNAME="",
        IMAP_SSL=False,
        IMAP_FOLDER_INBOX="INBOX",
        IMAP_TIMEOUT="",
        FETCH_BUFFER_SIZE=10,
        TTY_PATH="/dev/tty",
        LOG_LEVEL="INFO",
    )


@pytest.fixture
def fake_tty():
    """
    Patch os/termios/tty inside the password reader.
    `calls` records the order of open, setraw, restore and close.
    """
    calls = MagicMock()
    with patch('infrastructure.terminal.password_reader.os') as mock_os, \
         patch('infrastructure.terminal.password_reader.termios') as mock_termios, \
         patch('infrastructure.terminal.password_reader.tty') as mock_tty:
        mock_termios.error = termios.error
        mock_termios.TCSADRAIN = termios.TCSADRAIN
        mock_termios.tcgetattr.return_value = ["saved-mode"]
        mock_os.O_RDWR = os.O_RDWR
        mock_os.O_NOCTTY = os.O_NOCTTY
        mock_os.open.return_value = 7

        calls.attach_mock(mock_os.open, 'open')
        calls.attach_mock(mock_os.read, 'read')
        calls.attach_mock(mock_os.close, 'close')
        calls.attach_mock(mock_tty.setraw, 'setraw')
        calls.attach_mock(mock_termios.tcsetattr, 'restore')

        yield calls, mock_os, mock_termios, mock_tty
