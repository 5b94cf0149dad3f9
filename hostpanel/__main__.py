from __future__ import annotations

import argparse
import logging

import uvicorn

from hostpanel.config import settings


def main() -> None:
    parser = argparse.ArgumentParser(prog="hostpanel", description="Single-host monitoring backend")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--log-level", default=settings.log_level)
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    uvicorn.run("hostpanel.main:app", host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
