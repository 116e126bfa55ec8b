#!/usr/bin/env python3
"""Launch the geofee API under uvicorn, honouring the PORT environment variable."""

import os
import subprocess
import sys

APP_MODULE = "geofee.main:app"


def _resolve_port(default: int = 8000) -> int:
    raw = os.environ.get("PORT", str(default))
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: Invalid PORT value '{raw}', using default {default}", file=sys.stderr)
        return default


def _src_path() -> str:
    here = os.path.dirname(os.path.abspath(__file__))
    src = os.path.join(here, "src")
    if not os.path.isdir(src):
        print(f"Warning: src directory not found at {src}", file=sys.stderr)
        return here
    return src


def main() -> int:
    port = _resolve_port()
    src = _src_path()
    existing = os.environ.get("PYTHONPATH", "")
    os.environ["PYTHONPATH"] = f"{src}{os.pathsep}{existing}" if existing else src
    sys.path.insert(0, src)

    # Fail fast on configuration or import errors before handing over to uvicorn.
    try:
        import geofee.main  # noqa: F401
    except Exception as e:
        print(f"Failed to import geofee.main ({type(e).__name__}): {e}", file=sys.stderr)
        return 1

    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        APP_MODULE,
        "--host",
        "0.0.0.0",
        "--port",
        str(port),
        "--proxy-headers",
        "--forwarded-allow-ips",
        "*",
    ]
    print(f"Starting {APP_MODULE} on port {port} (PYTHONPATH={os.environ['PYTHONPATH']})", file=sys.stderr)
    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
