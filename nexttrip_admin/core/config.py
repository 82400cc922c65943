import os
from dotenv import load_dotenv

load_dotenv(override=True)


class Config:
    """
    Base configuration for NextTrip Admin.
    Deployments override these through environment variables or app.config.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')

    # NextTrip backend
    NEXTTRIP_API_URL = os.getenv('NEXTTRIP_API_URL', 'https://api.nexttrip.asia/api')
    # Service token used when the admin session carries none (scripts, kiosks)
    NEXTTRIP_API_TOKEN = os.getenv('NEXTTRIP_API_TOKEN')
    NEXTTRIP_API_TIMEOUT = int(os.getenv('NEXTTRIP_API_TIMEOUT', '30'))

    # Where the surrounding app shell signs admins in
    NEXTTRIP_LOGIN_URL = os.getenv('NEXTTRIP_LOGIN_URL', '/login')

    # Origins allowed to call the admin JSON API
    ADMIN_CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv('ADMIN_CORS_ORIGINS', 'http://localhost:3000').split(',')
        if origin.strip()
    ]

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Persistent application log store
    LOG_DB = os.getenv('LOG_DB', os.path.join(DB_DIR, "admin_logs.db"))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
