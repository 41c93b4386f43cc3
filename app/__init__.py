"""Advokat expiry service: request auto-expiration, activity alerts, cancellation."""

__version__ = "0.1.0"
