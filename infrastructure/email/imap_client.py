# infrastructure/email/imap_client.py
from __future__ import annotations
import logging
from typing import Any, Iterator

from imapclient import IMAPClient
from imapclient.exceptions import IMAPClientError, LoginError

from domain.errors import AuthenticationError, ConnectionFailedError, FetchError
from domain.models import BodyPart, FetchedMessage
from domain.sequence_set import SequenceSet
from utils.mime_text import decode_mime_words, to_text

logger = logging.getLogger(__name__)

DEFAULT_PORT = 143
FETCH_ITEMS = ["ENVELOPE", "RFC822.SIZE", "BODYSTRUCTURE"]


def parse_server(address: str) -> tuple[str, int]:
    """
    "host[:port]" → (host, port). Admite "[::1]:993". Sin puerto explícito
    se usa 143 (puerto IMAP sin cifrar), también con --ssl.
    """
    address = address.strip()
    if address.startswith("["):
        end = address.find("]")
        if end == -1:
            raise ValueError(f"Dirección de servidor inválida: {address!r}")
        host, rest = address[1:end], address[end + 1:]
        if not rest:
            return host, DEFAULT_PORT
        if not rest.startswith(":"):
            raise ValueError(f"Dirección de servidor inválida: {address!r}")
        port = rest[1:]
    elif address.count(":") == 1:
        host, port = address.split(":")
    else:
        # sin puerto (o IPv6 sin corchetes)
        return address, DEFAULT_PORT

    if not port.isdigit():
        raise ValueError(f"Puerto inválido en {address!r}: {port!r}")
    return host, int(port)


# ───────── BODYSTRUCTURE → BodyPart ─────────
def _param_dict(raw: Any) -> dict[str, str] | None:
    # (b"NAME", b"x.pdf", b"CHARSET", b"utf-8") → {"name": "x.pdf", "charset": "utf-8"}
    if not isinstance(raw, (tuple, list)):
        return None
    items = list(raw)
    return {to_text(k).lower(): to_text(v) for k, v in zip(items[0::2], items[1::2])}


def _disposition(raw: Any) -> tuple[str, dict[str, str] | None]:
    if isinstance(raw, (tuple, list)) and raw and isinstance(raw[0], (bytes, str)):
        params = _param_dict(raw[1]) if len(raw) > 1 else None
        return to_text(raw[0]), params
    return "", None


def _disposition_index(mime_type: str, subtype: str) -> int:
    # campos de extensión tras los básicos (type .. size = 0..6)
    if mime_type == "text":
        return 9
    if mime_type == "message" and subtype == "rfc822":
        return 11
    return 8


def body_part_from_bodystructure(bs: Any) -> BodyPart:
    """Convierte el BodyData de imapclient en un árbol BodyPart inmutable."""
    # BodyData.is_multipart: las partes hijas vienen anidadas en una lista en bs[0]
    if isinstance(bs[0], list):
        children = tuple(body_part_from_bodystructure(child) for child in bs[0])
        subtype = to_text(bs[1]).lower() if len(bs) > 1 else ""
        return BodyPart(mime_type="multipart", subtype=subtype, children=children)

    mime_type = to_text(bs[0]).lower()
    subtype = to_text(bs[1]).lower() if len(bs) > 1 else ""
    params = _param_dict(bs[2]) if len(bs) > 2 else None
    size = bs[6] if len(bs) > 6 and isinstance(bs[6], int) else 0
    idx = _disposition_index(mime_type, subtype)
    disposition, disposition_params = _disposition(bs[idx]) if len(bs) > idx else ("", None)
    return BodyPart(
        mime_type=mime_type,
        subtype=subtype,
        disposition=disposition,
        disposition_params=disposition_params,
        params=params,
        size=size,
    )


def _address(addr: Any) -> str:
    mailbox = to_text(addr.mailbox)
    host = to_text(addr.host)
    return f"{mailbox}@{host}" if host else mailbox


def _to_fetched_message(seq: int, data: dict[bytes, Any]) -> FetchedMessage:
    envelope = data.get(b"ENVELOPE")
    bodystructure = data.get(b"BODYSTRUCTURE")
    return FetchedMessage(
        seq=seq,
        senders=tuple(_address(a) for a in (getattr(envelope, "from_", None) or ())),
        recipients=tuple(_address(a) for a in (getattr(envelope, "to", None) or ())),
        subject=decode_mime_words(getattr(envelope, "subject", None)),
        date=getattr(envelope, "date", None),
        size=int(data.get(b"RFC822.SIZE") or 0),
        body=body_part_from_bodystructure(bodystructure) if bodystructure else None,
    )


class IMAPSession:
    def __init__(self, host: str, port: int, user: str, password: str,
                 ssl: bool = False, timeout: float | None = None) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.ssl = ssl
        self.timeout = timeout
        self.client: IMAPClient | None = None

    def __enter__(self) -> "IMAPSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # el logout nunca enmascara un error previo ni convierte un éxito en fallo
        try:
            if self.client:
                self.client.logout()
        except Exception:
            logger.exception("Error cerrando sesión IMAP")
        finally:
            self.client = None

    def open(self) -> None:
        try:
            # fechas del envelope con su zona horaria, sin pasar a hora local naive
            client = IMAPClient(self.host, port=self.port, ssl=self.ssl,
                                use_uid=False, timeout=self.timeout)
            client.normalise_times = False
        except (IMAPClientError, OSError) as exc:
            raise ConnectionFailedError(f"No se pudo conectar a {self.host}:{self.port}: {exc}") from exc

        try:
            client.login(self.user, self.password)
        except (IMAPClientError, OSError) as exc:
            try:
                client.shutdown()
            except OSError:
                logger.debug("Fallo cerrando el socket tras login fallido", exc_info=True)
            if isinstance(exc, LoginError):
                raise AuthenticationError(f"Login rechazado para {self.user}: {exc}") from exc
            raise ConnectionFailedError(f"Conexión perdida durante el login: {exc}") from exc

        self.client = client
        logger.debug("Sesión IMAP abierta en %s:%s (ssl=%s)", self.host, self.port, self.ssl)

    def select_inbox(self, folder: str = "INBOX") -> int:
        """SELECT de sólo lectura; devuelve el número de mensajes (EXISTS)."""
        assert self.client
        try:
            info = self.client.select_folder(folder, readonly=True)
        except (IMAPClientError, OSError) as exc:
            raise FetchError(f"No se pudo seleccionar {folder}: {exc}") from exc
        count = int(info.get(b"EXISTS", 0))
        logger.debug("Carpeta %s seleccionada: %d mensajes", folder, count)
        return count

    def fetch_metadata(self, sequence_set: SequenceSet) -> Iterator[FetchedMessage]:
        """FETCH (ENVELOPE RFC822.SIZE BODYSTRUCTURE) en orden de respuesta del servidor."""
        assert self.client
        try:
            response = self.client.fetch(str(sequence_set), FETCH_ITEMS)
        except (IMAPClientError, OSError) as exc:
            raise FetchError(f"FETCH {sequence_set} falló: {exc}") from exc
        for seq, data in response.items():
            yield _to_fetched_message(seq, data)
