"""Configuration layer — yucon.toml settings, file discovery, logging setup."""
