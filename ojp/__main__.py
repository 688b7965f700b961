"""Run the provider with uvicorn: ``python -m ojp``."""

import logging

import uvicorn

from ojp.core.app import create_app
from ojp.core.settings import ProviderSettings


def main() -> None:
    settings = ProviderSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
