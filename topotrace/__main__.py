"""Allow ``python -m topotrace``."""

from topotrace.cli import main

if __name__ == "__main__":
    main()
