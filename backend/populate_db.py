"""Seed the database with the sample sneaker catalog and an admin account.

Usage: python populate_db.py [admin_email] [admin_password]
"""
import os
import sys
from decimal import Decimal

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.product import Product
from models.users import User
from utils.hashing import get_password_hash

UNSPLASH = "https://images.unsplash.com/photo-{}?w=400"

SAMPLE_PRODUCTS = [
    ("Nike Air Max 270", "Comfortable running shoes with Air Max technology", "129.99",
     "1542291026-7eec264c27ff", "Nike", ["7", "8", "9", "10", "11"], 50),
    ("Adidas Ultraboost 22", "High-performance running shoes with Boost midsole", "179.99",
     "1595950653106-6c9ebd614d3a", "Adidas", ["7", "8", "9", "10", "11", "12"], 30),
    ("Converse Chuck Taylor", "Classic canvas sneakers for everyday wear", "59.99",
     "1539185441755-769473a23570", "Converse", ["6", "7", "8", "9", "10", "11"], 75),
    ("Vans Old Skool", "Iconic skate shoes with side stripe", "69.99",
     "1525966222134-fcfa99b8ae77", "Vans", ["7", "8", "9", "10", "11"], 40),
    ("Puma RS-X", "Retro-inspired chunky sneakers", "99.99",
     "1600185365483-26d7a4cc7519", "Puma", ["7", "8", "9", "10", "11"], 25),
    ("New Balance 990v5", "Made in USA premium running shoes", "199.99",
     "1552346154-21d32810aba3", "New Balance", ["7", "8", "9", "10", "11", "12"], 20),
]


def seed(session, admin_email: str, admin_password: str):
    if session.query(Product).count() == 0:
        for name, description, price, photo, brand, sizes, stock in SAMPLE_PRODUCTS:
            session.add(Product(
                name=name, description=description, price=Decimal(price),
                image_url=UNSPLASH.format(photo), brand=brand, sizes=sizes, stock_quantity=stock,
            ))
        print(f"Added {len(SAMPLE_PRODUCTS)} products.")
    else:
        print("Products already present, skipping catalog.")

    email = admin_email.strip().lower()
    if not session.query(User).filter(User.email == email).first():
        session.add(User(email=email, password_hash=get_password_hash(admin_password), role="admin", full_name="Administrator"))
        print(f"Created admin account {email}.")

    session.commit()


if __name__ == "__main__":
    init_db()
    admin_email = sys.argv[1] if len(sys.argv) > 1 else os.getenv("ADMIN_EMAIL", "admin@storefront.dev")
    admin_password = sys.argv[2] if len(sys.argv) > 2 else os.getenv("ADMIN_PASSWORD", "admin123")
    session = SessionLocal()
    try:
        seed(session, admin_email, admin_password)
    finally:
        session.close()
