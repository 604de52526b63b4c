"""Core application modules: constants, logging, middleware and error handlers."""
