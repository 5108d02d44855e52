"""Deployment commands, tool wrappers, AWS listing, bastion settings and host translation for funcie."""

__version__ = "0.1.0"