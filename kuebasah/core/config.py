import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the Kue Basah storefront.
    Deployments provide paths and secrets via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'kue-basah-secret-key')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    BAKERY_DB = os.getenv('BAKERY_DB', os.path.join(DB_DIR, 'toko_kue.db'))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, 'app_logs.db'))

    # Uploaded cake images
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    MAX_IMAGE_SIZE = 5 * 1024 * 1024
    # Leave headroom for the other multipart fields
    MAX_CONTENT_LENGTH = MAX_IMAGE_SIZE + 512 * 1024

    # Admin session
    SESSION_LIFETIME_HOURS = int(os.getenv('SESSION_LIFETIME_HOURS', '24'))
    DEFAULT_ADMIN_USERNAME = os.getenv('DEFAULT_ADMIN_USERNAME', 'admin')
    DEFAULT_ADMIN_PASSWORD = os.getenv('DEFAULT_ADMIN_PASSWORD')

    # Comma separated list, "*" allows every origin
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # WhatsApp order handoff
    SHOP_NAME = os.getenv('SHOP_NAME', 'Waroeng Sultan')
    WHATSAPP_NUMBER = os.getenv('WHATSAPP_NUMBER', '6283130580669')
    FREE_SHIPPING_MIN_QTY = int(os.getenv('FREE_SHIPPING_MIN_QTY', '100'))
    FREE_SHIPPING_AREAS = [
        area.strip().lower()
        for area in os.getenv('FREE_SHIPPING_AREAS', 'pasir jambu,ciwidey').split(',')
        if area.strip()
    ]

    RECENT_ORDERS_LIMIT = 5

    # Port for local server
    port = int(os.getenv('PORT', '5000'))
