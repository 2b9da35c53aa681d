import os

# The API reads its settings at import time; keep test runs off the on-disk database.
os.environ.setdefault("OVERTIME_DATABASE_URL", "sqlite://")
os.environ.setdefault("OVERTIME_ENV", "test")
