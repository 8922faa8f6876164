"""Allow ``python -m bdd_runner``."""

from bdd_runner.cli import main

main()
