"""Module entry point for ``python -m crd_provider``."""

from crd_provider.cli import main

if __name__ == "__main__":
    main()
