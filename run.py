#!/usr/bin/env python3
"""
Bank Ledger Entry Point

Loads the newest valid snapshot, serves the ledger over HTTP and writes a new
snapshot when the server shuts down.
"""

import sys

from bank_ledger.api import run_server


if __name__ == "__main__":
    try:
        run_server()
    except KeyboardInterrupt:
        pass
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
