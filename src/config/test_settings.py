"""Settings for the pytest run.

Provides the values the production settings refuse to default
(``SECRET_KEY``) and swaps external services for local ones.
``TEST_DATABASE_URL`` points the suite at a real server.  Otherwise the
test database is a SQLite file, so threads in the race tests each get
their own connection, and ``IMMEDIATE`` transactions make concurrent
writers queue on the busy timeout instead of failing with "database is
locked".
"""

import os
import tempfile

from dj_database_url import parse as db_url

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("AWS_S3_BUCKET", "")
os.environ.setdefault("AUTH0_DOMAIN", "")

from config.settings import *  # noqa: E402,F401,F403
from config.settings import REST_FRAMEWORK  # noqa: E402

_TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "")

if _TEST_DATABASE_URL:
    DATABASES = {"default": db_url(_TEST_DATABASE_URL)}
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
            "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 20},
            "TEST": {
                "NAME": os.path.join(tempfile.gettempdir(), "nail_orders_test.sqlite3"),
            },
        }
    }

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": [],
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
