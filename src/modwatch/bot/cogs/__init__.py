"""Cogs package for Modwatch bot functionality."""
