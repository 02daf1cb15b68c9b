"""
Configuration loading and validation for the contact manager.

Provides strongly typed settings objects for the contacts data file, loaded
from environment variables and an optional .env file.
"""
