"""Field management logic for robotics competitions: schedules, awards, cards, alliance selection, match lists and field PLC I/O."""

__version__ = "0.1.0"