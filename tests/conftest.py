import os

# The engine and the shared app are built at import time; keep test runs off
# the on-disk database and away from the production rate limit.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_PER_MINUTE", "1000")
