"""Agent-AWStoolkit: fetch and display AWS Secrets Manager values."""

__version__ = "0.1.0"
