"""
REST route modules.
"""
