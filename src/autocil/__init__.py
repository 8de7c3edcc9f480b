"""autocil - tmux sessions generated from project directories."""

__version__ = "0.1.0"
