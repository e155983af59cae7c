#!/usr/bin/env python3
"""
Dashboard server entry point.

Validates configuration, then starts uvicorn on the FastAPI app. Installed
as the `pr-dashboard` console script.

Usage:
    # Development mode with auto-reload
    pr-dashboard

    # Bind to all interfaces on another port, no reload
    pr-dashboard --host 0.0.0.0 --port 8080 --no-reload

    # Or use uvicorn directly
    uvicorn dashboard.app:create_app --factory --reload
"""

import argparse

from utils.config_loader import load_config


def main():
    """Launch the PR Dashboard server."""
    parser = argparse.ArgumentParser(description="PR Dashboard server")
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="Host to bind the server to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to serve on (default: 8000)"
    )
    parser.add_argument(
        "--no-reload",
        action="store_true",
        help="Disable auto-reload (use for production)"
    )
    args = parser.parse_args()

    # Fail fast on missing OAuth credentials instead of on first request
    config = load_config()

    print(f"PR Dashboard: http://{args.host}:{args.port}")
    print(f"Sign in at:   http://{args.host}:{args.port}/auth/github")
    print(f"Searching {len(config.search_queries)} query(ies), log level {config.log_level}")

    import uvicorn
    uvicorn.run(
        "dashboard.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=not args.no_reload,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()
