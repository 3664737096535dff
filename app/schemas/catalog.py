from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class CategoryRead(CamelModel):
    id: str
    name: str
    description: str | None = None


class CommentCreate(CamelModel):
    content: str = Field(min_length=1)


class CommentRead(CamelModel):
    id: str
    product_id: str
    author_id: str | None = None
    content: str
    created_at: datetime


class ProductFields(CamelModel):
    title: str | None = None
    description: str | None = None
    content: str | None = None
    price: float | None = None
    discount_price: float | None = None
    image_urls: list[str] | None = None
    video_url: str | None = None
    category: list[str] | None = None
    size: str | None = None
    load_capacity: float | None = None
    engine: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _wrap_single_category(cls, value):
        if value is None or isinstance(value, list):
            return value
        return [value]


class ProductCreate(ProductFields):
    pass


class ProductUpdate(ProductFields):
    pass


class ProductSearch(CamelModel):
    title: str | None = None
    content: str | None = None
    created_at: datetime | None = None
    discount_price: float | None = None
    size: str | None = None
    load_capacity: float | None = None
    engine: str | None = None


class ProductRead(CamelModel):
    id: str
    title: str | None = None
    description: str | None = None
    content: str | None = None
    price: float | None = None
    discount_price: float | None = None
    image_urls: list[str] = Field(default_factory=list)
    video_url: str | None = None
    category: list[CategoryRead] = Field(default_factory=list, validation_alias="categories")
    size: str | None = None
    load_capacity: float | None = None
    engine: str | None = None
    comments: list[CommentRead] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
