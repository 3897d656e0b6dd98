"""Allow `python -m release_with_ease`."""

from release_with_ease.cli.main import main

if __name__ == "__main__":
    main()
