"""Save-game header and state, score-file and DES crypt(3) formats for a classic dungeon crawler."""

__version__ = "0.1.0"