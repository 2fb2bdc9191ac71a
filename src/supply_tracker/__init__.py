"""Tactical Supply tracker: equipment and supply request record store."""

__version__ = "1.0.0"
