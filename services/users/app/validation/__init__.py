"""Pure validators for user input."""
