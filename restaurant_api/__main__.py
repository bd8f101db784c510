"""Run the API with uvicorn: ``python -m restaurant_api``."""

import uvicorn

from restaurant_api.core.config import settings


def main() -> None:
    uvicorn.run(
        "restaurant_api.main:app",
        host=settings.app.host,
        port=settings.app.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
