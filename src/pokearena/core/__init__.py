"""Core arena logic."""
