"""
Inspira Configuration
Database, identity provider and API settings
"""

import os
from dotenv import load_dotenv

load_dotenv()

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "inspira")

# Identity provider (shared secret used to sign session tokens)
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE")

# Role claim that unlocks course authoring and the admin dashboard
ADMIN_ROLE = os.getenv("ADMIN_ROLE", "admin")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# List endpoints never return more than this many documents
COURSE_PAGE_SIZE = int(os.getenv("COURSE_PAGE_SIZE", "100"))

UNNAMED_COURSE = "Unnamed Course"
UNKNOWN_SUBJECT = "Unknown"
