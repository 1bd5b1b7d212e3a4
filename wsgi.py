"""
Kue Basah storefront
====================

Run with:
    python wsgi.py

Visit:
    http://localhost:5000/api/cakes        - Public catalog
    http://localhost:5000/api/admin/login  - Admin login (POST)
"""

from flask import Flask

from kuebasah import Config, KueBasah

app = Flask(__name__)

# Registers the catalog, checkout and admin modules
kuebasah = KueBasah(app)


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Kue Basah storefront")
    print("=" * 60)
    print(f"Catalog API:     http://localhost:{Config.port}/api/cakes")
    print(f"Admin API:       http://localhost:{Config.port}/api/admin")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=Config.port, debug=True)
