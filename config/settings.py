# config/settings.py
from __future__ import annotations
from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()

@dataclass(frozen=True)
class Settings:
    # IMAP (los flags de línea de comandos tienen prioridad)
    IMAP_SERVER: str = os.getenv("IMAP_SERVER", "")        # host[:port]
    IMAP_USERNAME: str = os.getenv("IMAP_USERNAME", "")
    IMAP_SSL: bool = os.getenv("IMAP_SSL", "false").lower() == "true"
    IMAP_FOLDER_INBOX: str = os.getenv("IMAP_FOLDER_INBOX", "INBOX")
    IMAP_TIMEOUT: str = os.getenv("IMAP_TIMEOUT", "")      # segundos; vacío = sin límite

    # FETCH
    FETCH_BUFFER_SIZE: int = int(os.getenv("FETCH_BUFFER_SIZE", 10))

    # Terminal / logs
    TTY_PATH: str = os.getenv("TTY_PATH", "/dev/tty")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # ───────── helpers ─────────
    def timeout_seconds(self) -> float | None:
        raw = (self.IMAP_TIMEOUT or "").strip()
        return float(raw) if raw else None
