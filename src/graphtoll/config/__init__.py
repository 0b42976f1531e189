"""Configuration — section models, settings resolution, and logging setup."""
