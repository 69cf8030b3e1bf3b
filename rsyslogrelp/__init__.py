"""Configuration model, decoding and admission validation for rsyslog RELP log forwarding."""

__version__ = "0.1.0"

__all__ = ["__version__"]