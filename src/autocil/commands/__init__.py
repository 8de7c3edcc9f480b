"""autocil CLI commands."""
