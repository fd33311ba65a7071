import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables in priority order:
# 1. backend/.env (lowest priority)
# 2. repo_root/.env (overrides backend)
# 3. repo_root/.env.local (highest priority - overrides everything)
repo_root = Path(__file__).parent.parent
env_local = repo_root / ".env.local"
env_file = repo_root / ".env"
backend_env = Path(__file__).parent / ".env"

if backend_env.exists():
    load_dotenv(dotenv_path=backend_env, override=False)
if env_file.exists():
    load_dotenv(dotenv_path=env_file, override=True)
if env_local.exists():
    load_dotenv(dotenv_path=env_local, override=True)

# -----------------------------------------------------------------------------
# Node store
# -----------------------------------------------------------------------------
# "sqlite" (default, local file) or "postgres"
DATABASE_BACKEND = os.getenv("DATABASE_BACKEND", "sqlite").strip().lower()
SQLITE_DB_PATH = os.getenv("SQLITE_DB_PATH", str(Path(__file__).parent / "jigsaw.db"))
POSTGRES_CONNECTION_STRING = os.getenv("POSTGRES_CONNECTION_STRING")  # Required when DATABASE_BACKEND=postgres
POSTGRES_POOL_MIN = int(os.getenv("POSTGRES_POOL_MIN", "1"))
POSTGRES_POOL_MAX = int(os.getenv("POSTGRES_POOL_MAX", "10"))

# parentId value that marks a top-level node
ROOT_PARENT_ID = os.getenv("ROOT_PARENT_ID", "0")

# -----------------------------------------------------------------------------
# HTTP surface
# -----------------------------------------------------------------------------
CORS_ALLOW_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]
# Built graph client (index.html + assets). Empty disables static hosting.
CLIENT_DIST_DIR = os.getenv("CLIENT_DIST_DIR", "").strip()
ENABLE_HTTPS_REDIRECT = os.getenv("ENABLE_HTTPS_REDIRECT", "false").lower() in ("true", "1", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
