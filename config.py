"""
Service configuration

All settings are read from the environment (a local .env file is loaded
first). Database connection settings live in database/db.py.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# Logging
LOG_FILE = os.getenv("LOG_FILE", "./logger/log.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()

# Business timezone used to decide what "today" means for pickup dates
BUSINESS_TIMEZONE = os.getenv("BUSINESS_TIMEZONE", "America/New_York")

# Status update emails
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "noreply@laundry.local")
EMAIL_SERVICE_NAME = os.getenv("EMAIL_SERVICE_NAME", "Laundry Service")

# Currency used when formatting money for display
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "$")

# Admin dashboard limits
DASHBOARD_PENDING_LIMIT = 50
DASHBOARD_RECENT_LIMIT = 10
