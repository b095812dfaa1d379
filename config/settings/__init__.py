# config/settings/__init__.py
import os

# DJANGO_ENV: local (default) | prod. pytest points straight at config.settings.test.
_env = os.getenv("DJANGO_ENV", "local").strip().lower()

if _env in {"prod", "production"}:
    from .prod import *  # noqa
else:
    from .local import *  # noqa
