"""Exception classes for configuration, routing and transport failures."""

import click


class ConfigurationError(click.ClickException):
    """Raised when a required setting is missing; fatal before serving."""


class RoutingError(Exception):
    """Raised for an unknown tool name or an unsupported resource URI."""


class TransportError(Exception):
    """Raised when the stdio channel goes away (broken pipe)."""
