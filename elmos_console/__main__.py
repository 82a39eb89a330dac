"""Entrypoint for `python -m elmos_console`."""

from .cli import main


if __name__ == "__main__":
    main()
