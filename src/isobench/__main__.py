"""Allow running isobench as ``python -m isobench``."""

from isobench.cli import main

main()
