"""Allow ``python -m icounter``."""

from icounter.cli.main import main

if __name__ == "__main__":
    main()
