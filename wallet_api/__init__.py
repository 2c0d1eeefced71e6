"""Subscription wallet API: Xaman payload proxy and XRPL MPToken lookups."""

__version__ = "0.1.0"
