"""Run the API with uvicorn: ``python -m catalog_favorites``."""

import uvicorn

from catalog_favorites.settings import get_settings


def main() -> None:
    settings = get_settings()
    # The factory builds the engine and catalog client inside the server process.
    uvicorn.run(
        "catalog_favorites.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
