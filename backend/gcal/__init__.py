# backend/gcal/__init__.py
"""
Package init: load environment variables from a .env file if present.
This runs before config and db read os.getenv.
"""

from dotenv import load_dotenv

load_dotenv()
