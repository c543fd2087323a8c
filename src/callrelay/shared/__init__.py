"""
Shared utilities: logging and domain exceptions.
"""
