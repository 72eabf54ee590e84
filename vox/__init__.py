"""Vox - record your voice, get text on the clipboard."""

__version__ = "0.1.0"
