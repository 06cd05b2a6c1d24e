"""Allow running lempctl as python -m lemp."""

from lemp.cli.main import main


if __name__ == "__main__":
    main()
