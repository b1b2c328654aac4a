from __future__ import annotations

import uvicorn

from .settings import get_settings


def main() -> None:
    """Serve the application configured from the environment."""
    settings = get_settings()
    uvicorn.run(
        "todo_service.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_keep_alive=60,
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    main()
