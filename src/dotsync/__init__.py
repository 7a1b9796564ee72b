"""dotsync - secret-aware commit and push for dotfiles repositories."""

__version__ = "0.3.0"
