"""
Core module - Configuration, exceptions, and shared models.
"""
