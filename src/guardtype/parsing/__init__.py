"""Configuration parsing — tokens and the attribute grammar."""
