"""Allow running as `python -m gitbin`."""

from .cli import main

if __name__ == "__main__":
    main()
