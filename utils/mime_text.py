# utils/mime_text.py
from __future__ import annotations
from email.errors import HeaderParseError
from email.header import decode_header, make_header


def to_text(value: bytes | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def decode_mime_words(raw: bytes | str | None) -> str:
    """
    Decodifica encoded-words RFC 2047 (=?utf-8?q?...?=).
    Si la cabecera está mal formada se devuelve tal cual.
    """
    text = to_text(raw)
    if "=?" not in text:
        return text
    try:
        return str(make_header(decode_header(text)))
    except (HeaderParseError, ValueError, LookupError, UnicodeDecodeError):
        return text
