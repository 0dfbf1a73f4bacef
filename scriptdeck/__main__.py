"""Module entrypoint for ``python -m scriptdeck``.

All argument parsing and runtime setup happen in ``scriptdeck.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
