"""Core service wiring: configuration and composition root."""
