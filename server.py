#!/usr/bin/env python3
import logging
import os

import uvicorn

from app import app

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

logger = logging.getLogger(__name__)


def main() -> None:
    logger.info("Recipe server running at http://localhost:%d", PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level="info")


if __name__ == "__main__":
    main()
