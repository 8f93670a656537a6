"""Freelancer pricing-quote backend."""

__version__ = "0.1.0"
