from sqlalchemy import Column, Integer, Numeric, String, Text
from database import Base


class Product(Base):
    __tablename__ = "product"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(18, 2), nullable=False)
    image_url = Column(String(512), nullable=True)


# Catalogue de démonstration (SEED_PRODUCTS=true)
DEMO_PRODUCTS = [
    {"name": "Laptop", "description": "15 inch laptop", "price": 999.99, "image_url": "laptop.png"},
    {"name": "Souris", "description": "Wireless mouse", "price": 29.99, "image_url": "mouse.png"},
    {"name": "Keyboard", "description": "Mechanical keyboard", "price": 149.99, "image_url": "keyboard.png"},
]
