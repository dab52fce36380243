#!/usr/bin/env python3
"""Cross-platform install script for linebot-client.

Usage:
    python install.py          # Library + CLI
    python install.py --dev    # Also installs pytest and pytest-asyncio
"""

import os
import platform
import shutil
import subprocess
import sys

MIN_PYTHON = (3, 11)


def main() -> None:
    if sys.version_info < MIN_PYTHON:
        sys.exit(
            f"Error: Python {MIN_PYTHON[0]}.{MIN_PYTHON[1]}+ is required. "
            f"You have {sys.version_info.major}.{sys.version_info.minor}."
        )

    dev = "--dev" in sys.argv
    project_dir = os.path.dirname(os.path.abspath(__file__))
    venv_dir = os.path.join(project_dir, ".venv")
    is_windows = platform.system() == "Windows"
    pip = os.path.join(venv_dir, "Scripts" if is_windows else "bin", "pip")

    if not os.path.isdir(venv_dir):
        print("Creating virtual environment...")
        subprocess.check_call([sys.executable, "-m", "venv", venv_dir])

    subprocess.check_call([pip, "install", "--upgrade", "pip"])
    target = ".[dev]" if dev else "."
    print(f"Installing linebot-client ({target})...")
    subprocess.check_call([pip, "install", "-e", target], cwd=project_dir)

    for src, dst in [("config.example.yaml", "config.yaml"), (".env.example", ".env")]:
        src_path = os.path.join(project_dir, src)
        dst_path = os.path.join(project_dir, dst)
        if not os.path.exists(dst_path) and os.path.exists(src_path):
            shutil.copy(src_path, dst_path)
            print(f"Created {dst} from {src}")

    activate_cmd = r".\.venv\Scripts\activate" if is_windows else "source .venv/bin/activate"
    print()
    print("Next steps:")
    print("  1. Edit .env - set LINE_CHANNEL_SECRET and LINE_CHANNEL_ACCESS_TOKEN")
    print(f"  2. Activate the virtual environment: {activate_cmd}")
    print("  3. Check config: linebot-client config-check")
    print("  4. Send a message: linebot-client push --to <USER_ID> --text 'Hello, world'")
    if dev:
        print("  5. Run the tests: pytest")
    print()


if __name__ == "__main__":
    main()
