"""Allow ``python -m techpulse.cli`` execution."""

from techpulse.cli.ingest import main

main()
