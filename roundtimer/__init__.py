"""RoundTimer — a drift-free single-round countdown timer."""

__version__ = "0.1.0"
