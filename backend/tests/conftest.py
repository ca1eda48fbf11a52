import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-richgoals-suite-0123456789")
os.environ.setdefault("JWT_ALGORITHM", "HS256")
os.environ.setdefault("GEMINI_API_KEY", "")
os.environ.setdefault("DATABASE_URL", "")
