"""Allow running as `python -m shellcomp`."""

from .cli import main

main()
