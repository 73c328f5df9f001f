"""Habit strength scoring with an exponential moving average."""

__version__ = "0.1.0"
