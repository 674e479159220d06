"""Real-time 2D grid fluid simulation on torch devices."""

__version__ = "0.1.0"
