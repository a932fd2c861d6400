"""Allow ``python -m mc_components``."""

from .cli import main

main()
