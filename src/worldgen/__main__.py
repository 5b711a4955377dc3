"""Allow ``python -m worldgen``."""

from .cli import main

main()
