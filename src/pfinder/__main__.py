"""Allow ``python -m pfinder``."""

from pfinder.cli import main

main()
