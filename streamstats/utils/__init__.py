"""
Configuration, logging and unit helpers.
"""
