"""
Display-layer redaction for customer contact details.
Not cryptographic: the goal is that sanitized views never echo a full value.
"""

MASK_CHAR = "•"


def mask_value(value: str, prefix: int = 2, suffix: int = 2, mask_char: str = MASK_CHAR) -> str:
    """Keep `prefix` leading and `suffix` trailing characters, mask the rest."""
    if not value:
        return ""
    length = len(value)
    if length <= prefix + suffix:
        return mask_char * max(0, length - 1)
    start = value[:prefix]
    end = value[length - suffix:] if suffix > 0 else ""
    return f"{start}{mask_char * (length - prefix - suffix)}{end}"


def mask_email(email: str) -> str:
    """Mask the local part and domain name while keeping the address shape."""
    if not email:
        return ""
    local, sep, domain = email.partition("@")
    if not sep or not domain:
        return mask_value(email, prefix=1, suffix=1)

    masked_local = mask_value(local, prefix=1, suffix=min(1, max(0, len(local) - 2)))
    domain_name, dot, rest = domain.partition(".")
    if not domain_name or not rest:
        return f"{masked_local}@{mask_value(domain, prefix=1, suffix=1)}"
    return f"{masked_local}@{mask_value(domain_name, prefix=1, suffix=1)}{dot}{rest}"
