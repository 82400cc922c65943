"""
NextTrip Admin Starter
======================

A ready-to-run Flask application with all NextTrip Admin modules enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000/health         - Health check
    http://localhost:5000/admin/         - Module overview (token required)
"""

import logging

from flask import Flask

from config import Config
from nexttrip_admin import NextTripAdmin

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

# Create Flask app
app = Flask(__name__)
app.config.from_object(Config)

# Initialize NextTrip Admin - this registers all modules automatically
nexttrip_admin = NextTripAdmin(app)


# =============================================================================
# Run the app
# =============================================================================

if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("NextTrip Admin")
    print("=" * 60)
    print(f"Backend API:     {Config.NEXTTRIP_API_URL}")
    print(f"Health:          http://localhost:5000/health")
    print(f"Admin API:       http://localhost:5000/admin/")
    print(f"Modules:         {', '.join(nexttrip_admin.get_registered_modules())}")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=5000, debug=True)
