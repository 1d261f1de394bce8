# domain/errors.py
from __future__ import annotations


class MailboxInspectorError(Exception):
    """Base de todos los errores que terminan la ejecución con diagnóstico."""


class ConnectionFailedError(MailboxInspectorError):
    pass


class AuthenticationError(MailboxInspectorError):
    pass


class RangeParseError(MailboxInspectorError, ValueError):
    pass


class FetchError(MailboxInspectorError):
    pass


class EnvelopeError(FetchError):
    """Un mensaje sin remitente o destinatario aborta todo el lote."""


class TerminalError(MailboxInspectorError):
    pass


class TerminalUnavailableError(TerminalError):
    pass


class ModeSwitchError(TerminalError):
    pass


class TerminalReadError(TerminalError):
    pass
