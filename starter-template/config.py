import os
from dotenv import load_dotenv

load_dotenv()

IS_PRODUCTION = (
    os.getenv('ENVIRONMENT') == 'production' or
    os.getenv('FLASK_ENV') == 'production' or
    os.getenv('PRODUCTION') == '1'
)

DB_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'databases')


class Config:
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # NextTrip backend
    NEXTTRIP_API_URL = os.getenv('NEXTTRIP_API_URL', 'https://api.nexttrip.asia/api')
    NEXTTRIP_API_TOKEN = os.getenv('NEXTTRIP_API_TOKEN', '')
    NEXTTRIP_API_TIMEOUT = int(os.getenv('NEXTTRIP_API_TIMEOUT', '30'))
    NEXTTRIP_LOGIN_URL = os.getenv('NEXTTRIP_LOGIN_URL', 'http://localhost:3000/login')

    # Front end allowed to call /admin/*/api
    ADMIN_CORS_ORIGINS = os.getenv('ADMIN_CORS_ORIGINS', 'http://localhost:3000').split(',')

    # Log database
    DB_DIR = DB_DIR
    LOG_DB = os.path.join(DB_DIR, 'admin_logs.db')

    # Sessions carry the backend token; keep the cookie secure in production
    SESSION_COOKIE_SECURE = IS_PRODUCTION
    SESSION_COOKIE_SAMESITE = 'None' if IS_PRODUCTION else 'Lax'
