"""
LinkVault - real-time echo server.
Runs separately from the API (default port 8081).
"""

import uvicorn
from fastapi import FastAPI

from config import settings
import models  # noqa: F401
from routers import echo

app = FastAPI(
    title="LinkVault Echo",
    description="WebSocket echo endpoint",
    version="0.1.0",
)

app.include_router(echo.router, tags=["Echo"])


def main():
    uvicorn.run(app, host=settings.API_HOST, port=settings.ECHO_PORT)


if __name__ == "__main__":
    main()
