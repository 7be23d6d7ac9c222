"""Utility functions and tools used across the opflash package.

- `logger`: Logging utilities and configuration
- `factory`: Generic factory pattern implementations (class from config block)
"""
