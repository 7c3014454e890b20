"""TechPulse -- AI-curated tech news feed."""

__version__ = "0.1.0"
