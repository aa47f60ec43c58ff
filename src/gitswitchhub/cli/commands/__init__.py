"""Command implementations for the gitswitchhub CLI."""
