import os

from config.base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
API_TOKEN = "test-token"
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
