"""
Licenses module - License lifecycle management.

This module handles:
- LicenseRecord entity and derived flags
- Activation, validation and deactivation against the licensing service
- Offline grace tracking and expiry handling
- The premium flag consumed by the feature gate
"""
