"""Root conftest — shared test configuration."""

import os

# Ensure tests never pick up real ledger or pinning credentials
os.environ.setdefault("OPERATOR_ACCOUNT_ID", "0.0.2")
os.environ.setdefault("OPERATOR_PRIVATE_KEY", "test-operator-key")
os.environ.setdefault("PINATA_JWT", "test-pinata-jwt")
os.environ.setdefault("FRONTEND_URL", "https://hives.example.com")
os.environ.setdefault("ENVIRONMENT", "test")
# Route tests reconcile pending transfers immediately
os.environ.setdefault("RECONCILE_GRACE_SECONDS", "0")
