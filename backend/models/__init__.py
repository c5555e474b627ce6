# Import every model so SQLAlchemy registers it on Base.metadata

from models.users import User
from models.category import Category
from models.product import Product
from models.cart import CartItem
from models.order import Order, OrderItem, OrderStatus
from models.review import Review
from models.log import Log

__all__ = ["User", "Category", "Product", "CartItem", "Order", "OrderItem", "OrderStatus", "Review", "Log"]
