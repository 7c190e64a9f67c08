"""Reflection-driven attribute mappings for DynamoDB model classes."""

__version__ = "0.1.0"
