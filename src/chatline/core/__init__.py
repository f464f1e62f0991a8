"""Settings, errors and security primitives."""
