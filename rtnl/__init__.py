"""Build rtnetlink requests for Linux links, addresses and neighbours and run them over an async connection."""

__version__ = "0.17.0"