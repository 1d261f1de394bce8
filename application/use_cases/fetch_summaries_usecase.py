# application/use_cases/fetch_summaries_usecase.py
from __future__ import annotations
import logging
import queue
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Protocol

from application.services.structure_walker import find_attachments
from domain.errors import EnvelopeError, FetchError, MailboxInspectorError
from domain.models import FetchedMessage, MessageSummary
from domain.sequence_set import SequenceSet

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 10

# marca de cierre del buffer: el productor no entregará más mensajes
_CLOSED = object()


class MailboxSession(Protocol):
    def select_inbox(self, folder: str = "INBOX") -> int: ...

    def fetch_metadata(self, sequence_set: SequenceSet) -> Iterator[FetchedMessage]: ...


def summarize(message: FetchedMessage) -> MessageSummary:
    if not message.senders:
        raise EnvelopeError(f"Mensaje {message.seq} sin remitente (From) en el envelope")
    if not message.recipients:
        raise EnvelopeError(f"Mensaje {message.seq} sin destinatario (To) en el envelope")

    attachments = find_attachments(message.body) if message.body else []
    return MessageSummary(
        sender=message.senders[0],
        recipient=message.recipients[0],
        subject=message.subject,
        date=message.date,
        size=message.size,
        attachment_names=tuple(a.filename for a in attachments),
    )


class FetchSummariesUseCase:
    """
    Un productor (hilo que ejecuta el FETCH) y un consumidor (el llamante) unidos
    por una cola acotada. El Future del productor es la señal de fin y sólo se
    consulta tras vaciar la cola hasta su cierre.
    """
    def __init__(
        self,
        *,
        session: MailboxSession,
        folder: str = "INBOX",
        buffer_size: int = DEFAULT_BUFFER_SIZE,
    ) -> None:
        self.session = session
        self.folder = folder
        self.buffer_size = buffer_size

    def target_set(self, count: int, range_spec: str | None) -> SequenceSet:
        if not range_spec:
            return SequenceSet.full(count)
        return SequenceSet.parse(range_spec)

    def execute(self, range_spec: str | None = None) -> list[MessageSummary]:
        count = self.session.select_inbox(self.folder)
        seqset = self.target_set(count, range_spec)
        # un rango explícito sobre un buzón vacío (o fuera de rango) no se envía al servidor
        if seqset.is_empty or not seqset.expand(count):
            logger.info("Sin mensajes que consultar en %s.", self.folder)
            return []

        logger.info("Solicitando metadatos de %s (%d mensajes en %s)…", seqset, count, self.folder)
        buffer: queue.Queue = queue.Queue(maxsize=self.buffer_size)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="imap-fetch") as pool:
            done = pool.submit(self._produce, seqset, buffer)
            summaries, data_error = self._drain(buffer)
            # la cola ya está cerrada: el resultado del FETCH es definitivo
            producer_error = done.exception()

        if producer_error is not None:
            logger.debug("FETCH terminó con error tras %d mensajes", len(summaries))
            if isinstance(producer_error, MailboxInspectorError):
                raise producer_error
            raise FetchError(f"FETCH {seqset} falló: {producer_error}") from producer_error
        if data_error is not None:
            if isinstance(data_error, MailboxInspectorError):
                raise data_error
            raise FetchError(f"Mensaje ilegible en {seqset}: {data_error}") from data_error

        logger.info("Recibidos %d mensajes.", len(summaries))
        return summaries

    def _produce(self, seqset: SequenceSet, buffer: queue.Queue) -> None:
        try:
            for message in self.session.fetch_metadata(seqset):
                buffer.put(message)
        finally:
            buffer.put(_CLOSED)

    def _drain(self, buffer: queue.Queue) -> tuple[list[MessageSummary], Exception | None]:
        summaries: list[MessageSummary] = []
        error: Exception | None = None
        while True:
            item = buffer.get()
            if item is _CLOSED:
                break
            if error is not None:
                # lote abortado: se sigue vaciando para no bloquear al productor
                continue
            try:
                summaries.append(summarize(item))
            except Exception as exc:
                # cualquier fallo del consumidor aborta el lote sin dejar al productor bloqueado
                error = exc
        return summaries, error
