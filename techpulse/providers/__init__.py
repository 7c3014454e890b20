"""Concrete adapters for the interfaces in :mod:`techpulse.interfaces`."""
