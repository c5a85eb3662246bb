"""Billing API entrypoint

Run with ``python api.py`` or ``uvicorn api:app``.
"""

import uvicorn
from config import ApplicationConfig
from src.api.app import create_app

app = create_app(ApplicationConfig)


def main():
    uvicorn.run(
        app,
        host=ApplicationConfig.API_HOST,
        port=int(ApplicationConfig.API_PORT),
        log_level=str(ApplicationConfig.LOG_LEVEL).lower(),
    )


if __name__ == "__main__":
    main()
