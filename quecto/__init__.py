"""Quecto: a minimal byte-oriented terminal text editor."""

__version__ = "1.1.0"
