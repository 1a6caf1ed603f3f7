"""Instruction builders for the recipe (token merge) program."""

__version__ = "0.1.0"
