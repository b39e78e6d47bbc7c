#!/usr/bin/env python3
"""
Development server.

Usage:
    python run_dev.py
    python run_dev.py --port 8080
    python run_dev.py --no-reload
"""

import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def main():
    from unida.config import Config

    parser = argparse.ArgumentParser(description="UNIDA Papers dev server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=Config.port, help=f"Port to bind (default: {Config.port})")
    parser.add_argument("--reload", action="store_true", default=True, help="Enable auto-reload (default: True)")
    parser.add_argument("--no-reload", dest="reload", action="store_false", help="Disable auto-reload")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"], help="Log level")

    args = parser.parse_args()

    import uvicorn

    print(f"🚀 UNIDA Papers on http://{args.host}:{args.port} (docs: /docs, reload: {args.reload})")

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        reload_dirs=["api", "unida"] if args.reload else None,
    )


if __name__ == "__main__":
    main()
