"""
Entry point: `python -m users_api` serves the app on LISTEN_HOST:PORT.
"""

import uvicorn

from users_api.config import settings


def main() -> None:
    uvicorn.run(
        "users_api.main:create_app",
        factory=True,
        host=settings.listen_host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
