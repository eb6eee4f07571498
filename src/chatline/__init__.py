"""Chatline: profile records, dual-log messaging and realtime fan-out."""

__version__ = "0.1.0"
