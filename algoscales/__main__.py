"""Module entrypoint for ``python -m algoscales``."""

from .cli import main


if __name__ == "__main__":
    main()
