# config/settings/test.py
from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret-key"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

MR_IDENTITY_PROVIDER = "mr_core.iam.identity.ProfileIdentityProvider"
MR_ACCESS_GRANT_TTL_DAYS = 30

# let pytest's caplog see application logs
LOGGING["loggers"]["mr_core"]["propagate"] = True  # noqa: F405
