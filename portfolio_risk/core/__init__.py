"""Configuration, enums and shared defaults."""
