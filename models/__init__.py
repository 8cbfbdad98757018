from models.subscription import EmailSubscription

__all__ = [
    "EmailSubscription",
]
