#!/usr/bin/env python3
"""
Othello AI Engine - Main Entry Point
"""

import logging

import uvicorn

from .config import load_config


def main():
    config = load_config()
    logging.basicConfig(
        level=config["log_level"].upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger = logging.getLogger("reversi")
    logger.info("Starting Othello AI Engine on http://%s:%d", config["host"], config["port"])
    logger.info("API documentation: http://%s:%d/docs", config["host"], config["port"])

    uvicorn.run(
        "reversi.server:app",
        host=config["host"],
        port=config["port"],
        log_level=config["log_level"],
    )


if __name__ == "__main__":
    main()
