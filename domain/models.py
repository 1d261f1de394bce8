# domain/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class BodyPart:
    """
    Nodo del árbol BODYSTRUCTURE.
      - multipart: sólo `children` tiene sentido (disposición ignorada)
      - hoja: sin hijos; disposición + parámetros de disposición y de Content-Type
    """
    mime_type: str
    subtype: str = ""
    children: tuple[BodyPart, ...] = ()
    disposition: str = ""
    disposition_params: dict[str, str] | None = None
    params: dict[str, str] | None = None
    size: int = 0

    @property
    def is_multipart(self) -> bool:
        return self.mime_type.lower() == "multipart"


@dataclass(frozen=True)
class AttachmentRecord:
    filename: str
    size: int


@dataclass(frozen=True)
class FetchedMessage:
    seq: int
    senders: tuple[str, ...]
    recipients: tuple[str, ...]
    subject: str
    date: datetime | None
    size: int
    body: BodyPart | None = None


@dataclass(frozen=True)
class MessageSummary:
    sender: str
    recipient: str
    subject: str
    date: datetime | None
    size: int
    attachment_names: tuple[str, ...] = field(default_factory=tuple)

    @property
    def attachment_count(self) -> int:
        return len(self.attachment_names)
