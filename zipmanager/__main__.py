"""Module entrypoint for ``python -m zipmanager``."""

from .cli import main


if __name__ == "__main__":
    main()
