"""Shared utilities for the backend."""
from utils.case import dict_keys_to_camel, to_camel_key
from utils.masking import mask_email, mask_value

__all__ = [
    "to_camel_key",
    "dict_keys_to_camel",
    "mask_value",
    "mask_email",
]
