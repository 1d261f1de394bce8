# infrastructure/terminal/password_reader.py
from __future__ import annotations
import codecs
import os
import sys
import termios
import tty
from typing import TextIO

from domain.errors import (
    ModeSwitchError,
    TerminalError,
    TerminalReadError,
    TerminalUnavailableError,
)

DEFAULT_TTY = "/dev/tty"


class RawTerminal:
    """
    Acceso exclusivo al terminal en modo raw (sin eco).
    Uso:
        with RawTerminal("/dev/tty") as term:
            ch = term.read_char()
    Al salir SIEMPRE se restaura el modo previo y se cierra el descriptor,
    también si la lectura o la propia restauración fallan.
    """
    def __init__(self, path: str = DEFAULT_TTY) -> None:
        self.path = path
        self.fd: int | None = None
        self._saved_mode: list | None = None
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def __enter__(self) -> "RawTerminal":
        try:
            self.fd = os.open(self.path, os.O_RDWR | os.O_NOCTTY)
        except OSError as exc:
            raise TerminalUnavailableError(f"No se pudo abrir el terminal {self.path}: {exc}") from exc

        try:
            self._saved_mode = termios.tcgetattr(self.fd)
            tty.setraw(self.fd)
        except (termios.error, OSError) as exc:
            self._close()
            raise ModeSwitchError(f"No se pudo activar el modo raw en {self.path}: {exc}") from exc
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self._restore(exc)
        finally:
            self._close()

    def _restore(self, prior: BaseException | None) -> None:
        if self.fd is None or self._saved_mode is None:
            return
        try:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_mode)
        except (termios.error, OSError) as restore_exc:
            # __cause__ = error previo (si lo hay), __context__ = fallo de restauración
            raise ModeSwitchError(
                f"No se pudo restaurar el modo del terminal {self.path}: {restore_exc}"
            ) from (prior or restore_exc)
        finally:
            self._saved_mode = None

    def _close(self) -> None:
        if self.fd is None:
            return
        fd, self.fd = self.fd, None
        try:
            os.close(fd)
        except OSError as exc:
            raise TerminalError(f"No se pudo cerrar el terminal {self.path}: {exc}") from exc

    def read_char(self) -> str:
        assert self.fd is not None
        while True:
            try:
                chunk = os.read(self.fd, 1)
            except OSError as exc:
                raise TerminalReadError(f"Error leyendo del terminal: {exc}") from exc
            if not chunk:
                raise TerminalReadError("Fin de entrada antes de pulsar Enter")
            ch = self._decoder.decode(chunk)
            if ch:
                return ch


def read_password(prompt: str = "Enter your password: ", path: str = DEFAULT_TTY,
                  stream: TextIO | None = None) -> str:
    """
    Pide la contraseña por el terminal de control sin mostrarla.
    Lee carácter a carácter hasta \\r o \\n (no incluido en el resultado).
    """
    out = stream or sys.stderr
    out.write(prompt)
    out.flush()

    chars: list[str] = []
    with RawTerminal(path) as term:
        while True:
            ch = term.read_char()
            if ch in ("\r", "\n"):
                break
            if ch == "\x03":
                # en modo raw Ctrl-C no genera SIGINT
                raise KeyboardInterrupt
            chars.append(ch)

    out.write("\n")
    out.flush()
    return "".join(chars)
