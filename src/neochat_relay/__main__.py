"""Run the NeoChat relay server.

Usage:
    python -m neochat_relay                       # in-memory store on port 8787
    python -m neochat_relay --storage redis --redis-url redis://localhost:6379
"""

from __future__ import annotations

import argparse

import uvicorn

from neochat_relay.core.settings import settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="NeoChat relay server")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument(
        "--storage",
        choices=["memory", "redis"],
        default=settings.storage_backend,
        help="Key-value store backend",
    )
    parser.add_argument("--redis-url", default=settings.redis_url, help="Redis connection URL")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # The app and its store dependency read the shared settings object.
    settings.storage_backend = args.storage
    settings.redis_url = args.redis_url
    settings.log_level = args.log_level

    from neochat_relay.main import app

    print(f"\n  {settings.app_name} v{settings.app_version}")
    print(f"  Listen:  {args.host}:{args.port}")
    print(f"  Storage: {args.storage}\n")

    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
