"""
Run the API server.

Usage:
    python -m mailing_api
"""

import uvicorn

from mailing_api.config import get_settings


def main() -> None:
    settings = get_settings()
    # Shutdown on SIGINT/SIGTERM runs the app lifespan, which stops the watcher.
    uvicorn.run("mailing_api.main:app", host="0.0.0.0", port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
