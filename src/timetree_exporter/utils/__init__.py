"""Utility functions for TimeTree exporter."""

from timetree_exporter.utils.masking import mask_email, mask_token

__all__ = [
    "mask_email",
    "mask_token",
]
