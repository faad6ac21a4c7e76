"""
Django settings module.

This package contains environment-specific settings:
- base.py: Base settings shared across all environments
- dev.py: Development settings (short offline grace, debug logging)
- test.py: Test settings (in-memory cache)
- prod.py: Production settings
"""
