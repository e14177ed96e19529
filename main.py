import logging
import os

import uvicorn

from seedcheck.backend.web import app


logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )
