"""Allow ``python -m incubator``."""

from incubator.cli import main

if __name__ == "__main__":
    main()
