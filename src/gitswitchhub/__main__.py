"""Allow ``python -m gitswitchhub``."""

from gitswitchhub.cli.main import main


if __name__ == "__main__":
    main()
