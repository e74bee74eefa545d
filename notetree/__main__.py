"""Module entrypoint for ``python -m notetree``."""

from .cli import main


if __name__ == "__main__":
    main()
