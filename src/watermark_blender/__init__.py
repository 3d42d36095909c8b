"""Blend a watermark image onto a base image."""

__version__ = "0.1.0"
