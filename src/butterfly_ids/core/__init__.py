"""Core layout and configuration."""
