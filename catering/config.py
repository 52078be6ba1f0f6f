import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./catering.db")

# Supabase Auth Configuration
# Access tokens are HS256 JWTs signed with the project's JWT secret
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

# Frontend base URL for proposal links
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "onboarding@resend.dev")
BUSINESS_NAME = os.getenv("BUSINESS_NAME", "Your Caterer")

# Proposal links never expire unless configured (days)
PROPOSAL_EXPIRY_DAYS = int(os.getenv("PROPOSAL_EXPIRY_DAYS", "0"))
