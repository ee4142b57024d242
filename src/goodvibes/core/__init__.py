"""Shared infrastructure: configuration, exceptions, logging, utilities, CLI."""
