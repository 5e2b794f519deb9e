"""Configuration, logging, security, errors and storage primitives."""
