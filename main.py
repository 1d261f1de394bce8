# main.py
# Punto de entrada: pide contraseña -> sesión IMAP -> FETCH de metadatos -> tabla por stdout
from __future__ import annotations
import logging
import sys
from config.settings import Settings
from domain.errors import MailboxInspectorError
from interface_adapters.cli.arguments import is_complete, parse_args
from interface_adapters.controllers.inspect_controller import InspectController

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    settings = Settings()
    args, parser = parse_args(settings, argv)
    if not is_complete(args):
        parser.print_help(sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

    controller = InspectController(settings=settings)
    try:
        controller.run(
            server=args.server,
            user=args.user,
            ssl=args.ssl,
            range_spec=args.range_spec,
            folder=args.folder,
            timeout=args.timeout,
        )
    except (MailboxInspectorError, ValueError) as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.error("Interrumpido")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
