"""Module entrypoint.

Allows:
    python -m ultragrep
"""

from __future__ import annotations

from ultragrep.cli import main

if __name__ == "__main__":
    main()
