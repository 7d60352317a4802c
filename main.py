"""Pizzeria Application Entry Point."""

from dotenv import load_dotenv

load_dotenv()

from pizzeria.api import create_app  # noqa: E402
from pizzeria.bootstrap import PizzeriaApp  # noqa: E402
from pizzeria.logging import get_logger  # noqa: E402

log = get_logger("pizzeria.main")

# One PizzeriaApp per process; the HTTP layer and the exporter share its accumulator.
_pizzeria = PizzeriaApp.from_env()
app = create_app(_pizzeria)


def main():
    """Start the Pizzeria server using Granian (Rust ASGI server)."""
    from granian import Granian
    from granian.constants import Interfaces

    cfg = _pizzeria.config
    log.info("server_starting", host=cfg.server.host, port=cfg.server.port, server="granian")

    server = Granian(
        "main:app",
        address=cfg.server.host,
        port=cfg.server.port,
        interface=Interfaces.ASGI,
        workers=1,
    )
    server.serve()


if __name__ == "__main__":
    main()
