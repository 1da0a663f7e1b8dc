"""Console entry point: ``evalhub`` runs the API under uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from evalhub.infrastructure.config import get_settings

logger = logging.getLogger("evalhub")


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    logger.info("Serving EvalHub on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "evalhub.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
