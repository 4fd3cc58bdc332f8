"""stargate — astronaut duty history tracking."""

__version__ = "0.1.0"
