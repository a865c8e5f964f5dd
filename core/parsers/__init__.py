"""Parsers that turn uploaded text into normalized row-sets."""
