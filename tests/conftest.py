import os

# Settings are read once at import; keep tests off real secrets, files and SMTP.
os.environ.setdefault("DATA_ENCRYPTION_KEY", "test-data-encryption-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SMTP_HOST", "")
os.environ.setdefault("PLAID_CLIENT_ID", "")
os.environ.setdefault("PLAID_SECRET", "")
