from app.models.category import Category, product_categories
from app.models.comment import Comment
from app.models.product import Product
from app.models.user import User

__all__ = ["User", "Product", "Category", "Comment", "product_categories"]
