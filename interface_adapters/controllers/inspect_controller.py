# interface_adapters/controllers/inspect_controller.py
from __future__ import annotations
import logging
from typing import Callable, TextIO

from application.use_cases.fetch_summaries_usecase import FetchSummariesUseCase
from config.settings import Settings
from domain.models import MessageSummary
from infrastructure.email.imap_client import IMAPSession, parse_server
from infrastructure.terminal.password_reader import read_password
from interface_adapters.presenters.table_presenter import render_report

logger = logging.getLogger(__name__)


class InspectController:
    def __init__(
        self,
        settings: Settings,
        *,
        password_reader: Callable[[], str] | None = None,
        session_factory: Callable[..., IMAPSession] = IMAPSession,
    ) -> None:
        self.settings = settings
        self.password_reader = password_reader or (lambda: read_password(path=settings.TTY_PATH))
        self.session_factory = session_factory

    def collect(
        self,
        *,
        server: str,
        user: str,
        ssl: bool = False,
        range_spec: str | None = None,
        folder: str | None = None,
        timeout: float | None = None,
    ) -> list[MessageSummary]:
        host, port = parse_server(server)
        logger.info("Servidor: %s puerto %s", host, port)

        # errores de terminal abortan antes de cualquier conexión
        password = self.password_reader()
        logger.info("Contraseña recibida, conectando…")

        with self.session_factory(host, port, user, password, ssl=ssl, timeout=timeout) as session:
            logger.info("Conectado a %s", host)
            uc = FetchSummariesUseCase(
                session=session,
                folder=folder or self.settings.IMAP_FOLDER_INBOX,
                buffer_size=self.settings.FETCH_BUFFER_SIZE,
            )
            return uc.execute(range_spec or None)

    def run(self, *, stream: TextIO | None = None, **kwargs) -> int:
        summaries = self.collect(**kwargs)
        render_report(summaries, stream)
        return len(summaries)
