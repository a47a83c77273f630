# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Print a fresh AUTH_SECRET value."""

from __future__ import annotations

import argparse
import secrets
import sys
from pathlib import Path

SECRET_BYTES = 32


def generate_secret() -> str:
    return secrets.token_hex(SECRET_BYTES)


def env_defines_secret(env_path: Path) -> bool:
    if not env_path.exists():
        return False
    for line in env_path.read_text(encoding="utf-8").splitlines():
        if line.strip().startswith("AUTH_SECRET="):
            return True
    return False


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a signing secret for sessions")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="Env file to check for an existing AUTH_SECRET",
    )
    args = parser.parse_args(argv)

    print(f"AUTH_SECRET={generate_secret()}")
    if env_defines_secret(args.env_file):
        print(
            f"Warning: {args.env_file} already defines AUTH_SECRET; replace it manually "
            "to rotate (this signs out every session).",
            file=sys.stderr,
        )
    else:
        print(f"Add the line above to {args.env_file}.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
