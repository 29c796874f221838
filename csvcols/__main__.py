"""Module entrypoint for ``python -m csvcols``."""

from .cli import main


if __name__ == "__main__":
    main()
