"""Configuration, persistence, security and logging primitives."""
