from sqlalchemy import JSON, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.models.category import product_categories
from app.models.common import TimestampMixin, UUIDPrimaryKeyMixin


class Product(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "products"

    title: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float | None] = mapped_column(Float, nullable=True)
    discount_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    image_urls: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    video_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    size: Mapped[str | None] = mapped_column(String(100), nullable=True)
    load_capacity: Mapped[float | None] = mapped_column(Float, nullable=True)
    engine: Mapped[str | None] = mapped_column(String(100), nullable=True)

    categories = relationship("Category", secondary=product_categories, back_populates="products", order_by="Category.name")
    comments = relationship(
        "Comment",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )
