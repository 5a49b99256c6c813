"""CLI module for alchemykit."""
