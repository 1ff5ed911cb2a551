"""
todotray - System tray to-do list

A small persistent list of to-dos, added through a one-line entry window and
removed from the tray menu.
"""

__version__ = "0.1.0"
