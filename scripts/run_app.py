#!/usr/bin/env python
"""
Open the wellness pricing calculator (single event, multi-day, history).

Usage:
    python scripts/run_app.py

WELLNESS_PRICING_UI_PORT sets the Streamlit port (default 8501). Saved
calculations only survive a restart when WELLNESS_PRICING_HISTORY_PATH
points at a JSON file.
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'wellness_pricing' / 'ui' / 'app_streamlit.py'
    if not ui_path.exists():
        print(f"ERROR: calculator UI not found at {ui_path}")
        sys.exit(1)

    port = os.environ.get("WELLNESS_PRICING_UI_PORT", "8501")
    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path), '--server.port', port]

    if not os.environ.get("WELLNESS_PRICING_HISTORY_PATH"):
        print("Note: history is in-memory; set WELLNESS_PRICING_HISTORY_PATH to keep it.")
    print(f"Wellness pricing calculator on http://localhost:{port}")

    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nCalculator stopped.")


if __name__ == "__main__":
    main()
