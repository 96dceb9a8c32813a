"""Logging setup: formatters, rotating file handler and context variables."""
