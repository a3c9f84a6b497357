"""Package entry point.

Preferred invocation is via the installed console script:

    ads-prep ...

For convenience we also support:

    python -m ads_prep ...
"""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Entry point used by `python -m ads_prep`."""

    app()


if __name__ == "__main__":
    main()
