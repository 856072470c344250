"""
db/models.py – SQLAlchemy ORM models for shops, drinks and drink reviews.

Tables are created at startup (main.lifespan → init_db).
`drinks.search_count` is optional in older databases; readers must not rely on it.
"""
from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Integer, String, Text, text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Shop(Base):
    __tablename__ = "shops"

    id         = Column(Integer, primary_key=True, autoincrement=True)
    name       = Column(String,  nullable=False)
    address    = Column(String,  nullable=True)
    city       = Column(String,  nullable=True)
    lat        = Column(Float,   nullable=True)
    lng        = Column(Float,   nullable=True)
    created_at = Column(String,  nullable=True, server_default=text("(datetime('now'))"))

    def __repr__(self) -> str:
        return f"<Shop id={self.id} name={self.name!r}>"


class Drink(Base):
    __tablename__ = "drinks"

    id           = Column(Integer, primary_key=True, autoincrement=True)
    shop_id      = Column(Integer, ForeignKey("shops.id"), nullable=False, index=True)
    drink_type   = Column(String,  nullable=False, index=True)
    display_name = Column(String,  nullable=False)
    search_count = Column(Integer, nullable=True, default=0)
    created_at   = Column(String,  nullable=True, server_default=text("(datetime('now'))"))

    def __repr__(self) -> str:
        return f"<Drink id={self.id} display_name={self.display_name!r}>"


class DrinkReview(Base):
    __tablename__ = "drink_reviews"
    __table_args__ = (CheckConstraint("rating >= 1 AND rating <= 5", name="ck_rating_range"),)

    id         = Column(Integer, primary_key=True, autoincrement=True)
    drink_id   = Column(Integer, ForeignKey("drinks.id"), nullable=False, index=True)
    rating     = Column(Integer, nullable=False)
    comment    = Column(Text,    nullable=True)
    created_at = Column(String,  nullable=True, server_default=text("(datetime('now'))"))
