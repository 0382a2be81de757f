"""Declarative management of AWS EC2 Image Builder images and container recipes."""

__version__ = "1.0.0"
