"""Command-line tools for TechPulse.

- ``python -m techpulse.cli ingest`` -- run one ingestion pass
- ``python -m techpulse.cli seed`` -- insert two sample items for local work
- ``python -m techpulse.cli search "<text>"`` -- semantic search from the shell
"""
