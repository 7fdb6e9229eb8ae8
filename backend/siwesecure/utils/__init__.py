"""Shared helpers, validators, errors and decorators."""
