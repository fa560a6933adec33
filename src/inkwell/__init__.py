"""Inkwell: decompose, patch and reassemble AI-generated JSX markup."""

__version__ = "0.1.0"
