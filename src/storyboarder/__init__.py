"""Storyboard frame and voice generation for product videos."""

__version__ = "0.1.0"
