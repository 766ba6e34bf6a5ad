"""Core pipeline package for curating internet radio station lists.

This package provides typed, testable modules that the CLI script imports:
stream validation, duplicate removal, station curation and the Radio Browser client.
"""
