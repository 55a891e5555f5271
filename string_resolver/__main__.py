"""Allow running as ``python -m string_resolver``."""

from .cli import main

if __name__ == "__main__":
    main()
