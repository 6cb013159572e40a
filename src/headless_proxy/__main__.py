"""Allow running as `python -m headless_proxy`."""

from headless_proxy.cli import main

main()
