import socket

import uvicorn

from studydeck import app
from studydeck.config import settings


def find_free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


def resolve_port(configured: int) -> int:
    """Use STUDYDECK_PORT when set, otherwise any free port."""
    return configured if configured > 0 else find_free_port()


if __name__ == "__main__":
    port = resolve_port(settings.port)
    # The desktop shell reads this line to find the server
    print(f"PORT={port}", flush=True)
    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level)
