"""Moderation and flagging engine for the Dossier community marketplace."""

__version__ = "0.1.0"
