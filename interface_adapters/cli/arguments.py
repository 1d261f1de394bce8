# interface_adapters/cli/arguments.py
from __future__ import annotations
import argparse

from config.settings import Settings


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailbox-inspector",
        description="Lista remitente, destinatario, asunto, fecha, tamaño y adjuntos de un buzón IMAP.",
        epilog="Ejemplo: mailbox-inspector -s imap.mail.ru:993 -u <email> --ssl",
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="muestra esta ayuda")
    parser.add_argument("--ssl", action="store_true", default=settings.IMAP_SSL,
                        help="usa TLS (por defecto no se usa)")
    parser.add_argument("-s", "--server", default=settings.IMAP_SERVER,
                        help="servidor IMAP en formato address[:port] (puerto por defecto 143)")
    parser.add_argument("-n", "--range", dest="range_spec", default="",
                        help="rango de mensajes (p.ej. 1:3,7); todos por defecto")
    parser.add_argument("-u", "--user", default=settings.IMAP_USERNAME,
                        help="usuario; la contraseña se pide después sin mostrarla")
    parser.add_argument("--folder", default=settings.IMAP_FOLDER_INBOX,
                        help="carpeta a inspeccionar (por defecto %(default)s)")
    parser.add_argument("--timeout", type=float, default=settings.timeout_seconds(),
                        help="timeout de socket en segundos")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    return parser


def parse_args(settings: Settings, argv: list[str] | None = None) -> tuple[argparse.Namespace, argparse.ArgumentParser]:
    parser = build_parser(settings)
    return parser.parse_args(argv), parser


def is_complete(args: argparse.Namespace) -> bool:
    """Sin -h y con servidor y usuario."""
    return not args.help and bool(args.server) and bool(args.user)
