from __future__ import annotations

import os


os.environ.setdefault("FAMTIME_JWT_SECRET", "test-secret")
os.environ.setdefault("FAMTIME_APP_ENV", "test")
os.environ["FAMTIME_TIME_ZONE"] = "Europe/Copenhagen"
for _name in ("API_KEY", "MODEL", "BASE_URL", "PROXY_URL"):
    os.environ.pop(f"OPENAI_{_name}", None)
    os.environ.pop(f"FAMTIME_OPENAI_{_name}", None)
