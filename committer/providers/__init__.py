"""AI backend drivers."""
