"""A falling-block colour-matching puzzle game: rules, screens and a pygame window."""

__version__ = "0.1.0"