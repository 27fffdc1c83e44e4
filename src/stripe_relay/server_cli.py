"""CLI entry point for the Stripe relay server."""

import argparse
import os

from stripe_relay.config import Settings


def main(argv: list[str] | None = None) -> None:
    settings = Settings()
    parser = argparse.ArgumentParser(
        prog="stripe-relay",
        description="Stripe webhook relay: verify, simplify and forward billing events",
    )
    parser.add_argument("--host", default=settings.host, help=f"Bind host (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["debug", "info", "warning", "error"],
        help="Logging level",
    )
    parser.add_argument(
        "--console-logs",
        action="store_true",
        help="Human-readable console logs instead of JSON",
    )
    args = parser.parse_args(argv)

    # build_app re-reads settings from the environment
    os.environ["LOG_LEVEL"] = args.log_level
    if args.console_logs:
        os.environ["LOG_JSON"] = "false"

    import uvicorn

    uvicorn.run(
        "stripe_relay.main:build_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
