#!/usr/bin/env python
"""
Serve the wellness pricing HTTP API with uvicorn.

Usage:
    python scripts/run_api.py

WELLNESS_PRICING_HOST / WELLNESS_PRICING_PORT pick the bind address
(default 0.0.0.0:8000). Set WELLNESS_PRICING_RELOAD=0 to turn off
auto-reload. Calculator settings (WELLNESS_PRICING_EVENTS_PER_YEAR,
WELLNESS_PRICING_HISTORY_PATH, ...) pass straight through to the server.
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    src_path = str(project_root / "src")

    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [src_path, env.get("PYTHONPATH")]))

    host = env.get("WELLNESS_PRICING_HOST", "0.0.0.0")
    port = env.get("WELLNESS_PRICING_PORT", "8000")
    cmd = [sys.executable, "-m", "uvicorn", "wellness_pricing.api.main:app",
           "--host", host, "--port", port]
    if env.get("WELLNESS_PRICING_RELOAD", "1") != "0":
        cmd += ["--reload", "--reload-dir", src_path]

    print(f"Wellness pricing API on http://{host}:{port} (docs at /docs)")
    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
