"""Allow ``python -m microapi``."""

from microapi.cli import main

main()
