"""Configuration: settings models, config-file discovery, and logging setup."""
