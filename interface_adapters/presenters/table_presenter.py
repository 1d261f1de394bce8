# interface_adapters/presenters/table_presenter.py
from __future__ import annotations
import sys
from datetime import datetime
from typing import Iterable, TextIO

from domain.models import MessageSummary

HEADER = ("To Whom", "From Whom", "Subject", "Date", "Letter Size", "Attachments", "Attachment Names")


def format_date(value: datetime | None) -> str:
    # RFC 1123: "Mon, 02 Jan 2006 15:04:05 MST"
    if value is None:
        return ""
    return value.strftime("%a, %d %b %Y %H:%M:%S %Z").rstrip()


def format_row(m: MessageSummary) -> str:
    return "\t".join([
        m.recipient,
        m.sender,
        m.subject,
        format_date(m.date),
        str(m.size),
        str(m.attachment_count),
        ", ".join(m.attachment_names),
    ])


def render_report(summaries: Iterable[MessageSummary], stream: TextIO | None = None) -> None:
    out = stream or sys.stdout
    out.write("\t".join(HEADER) + "\n")
    for m in summaries:
        out.write(format_row(m) + "\n")
    out.flush()
