import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./talentnest.db")

# Firebase Configuration (identity provider)
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID")

# Emails allowed to register with the admin role
ADMIN_EMAILS = {
    email.strip().lower()
    for email in os.getenv("ADMIN_EMAILS", "").split(",")
    if email.strip()
}

# Cloudflare R2 Configuration (verification evidence, portfolio images)
R2_ACCOUNT_ID = os.getenv("R2_ACCOUNT_ID")
R2_ACCESS_KEY_ID = os.getenv("R2_ACCESS_KEY_ID")
R2_SECRET_ACCESS_KEY = os.getenv("R2_SECRET_ACCESS_KEY")
R2_BUCKET_NAME = os.getenv("R2_BUCKET_NAME", "talentnest")

# WhatsApp deep-link targets
WHATSAPP_WEB_URL = os.getenv("WHATSAPP_WEB_URL", "https://web.whatsapp.com/send")
WHATSAPP_MOBILE_URL = os.getenv("WHATSAPP_MOBILE_URL", "https://wa.me")

# Shown in contact message templates
UNIVERSITY_NAME = os.getenv("UNIVERSITY_NAME", "UNILORIN")

# Contact link rate limiting (per requester)
CONTACT_RATE_LIMIT = int(os.getenv("CONTACT_RATE_LIMIT", "30"))
CONTACT_RATE_WINDOW = int(os.getenv("CONTACT_RATE_WINDOW", "3600"))

# Frontend base URL
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
