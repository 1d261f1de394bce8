# application/services/structure_walker.py
from __future__ import annotations

from domain.models import AttachmentRecord, BodyPart
from utils.mime_text import decode_mime_words


def resolve_filename(part: BodyPart) -> str:
    """
    Primero `filename` de Content-Disposition; si falta o está vacío,
    `name` de Content-Type.
    """
    filename = (part.disposition_params or {}).get("filename") or ""
    if not filename:
        filename = (part.params or {}).get("name") or ""
    return decode_mime_words(filename.strip())


def find_attachments(part: BodyPart) -> list[AttachmentRecord]:
    """
    Recorre el árbol en profundidad (izquierda → derecha) y devuelve las hojas
    con disposición `attachment` y nombre de fichero resoluble, en orden de documento.
    """
    if part.is_multipart:
        found: list[AttachmentRecord] = []
        for child in part.children:
            found.extend(find_attachments(child))
        return found

    if (part.disposition or "").lower() != "attachment":
        return []

    filename = resolve_filename(part)
    if not filename:
        return []
    return [AttachmentRecord(filename=filename, size=part.size)]
