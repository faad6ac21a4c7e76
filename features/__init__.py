"""
Features module - Text editing features and license gating.

This module handles:
- Free features (character and word counts)
- Premium text transformations (case, base64)
- The feature gate that refuses premium features without a license
"""
