"""Allow `python -m screenspec`."""

from .cli import main

if __name__ == "__main__":
    main()
