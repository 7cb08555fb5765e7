from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import DeclarativeBase

class Base(DeclarativeBase):
    pass

db = SQLAlchemy(model_class=Base)


def _now():
    return datetime.now(timezone.utc)


class Recipe(db.Model):
    __tablename__ = 'recipes'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    source_url = db.Column(db.Text, default="")
    title = db.Column(db.String(300), nullable=False)
    image_url = db.Column(db.Text)
    ingredients = db.Column(db.JSON, nullable=False, default=list)  # free-text lines
    steps = db.Column(db.JSON, nullable=False, default=list)
    servings = db.Column(db.Integer)
    created_at = db.Column(db.DateTime(timezone=True), default=_now)
    cooked_at = db.Column(db.DateTime(timezone=True))

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "source_url": self.source_url,
            "image_url": self.image_url,
            "ingredients": list(self.ingredients or []),
            "steps": list(self.steps or []),
            "servings": self.servings,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "cooked_at": self.cooked_at.isoformat() if self.cooked_at else None,
        }


class KitchenItem(db.Model):
    __tablename__ = 'kitchen_items'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)


class GroceryList(db.Model):
    __tablename__ = 'grocery_lists'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, index=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipes.id', ondelete="SET NULL"))
    items = db.Column(db.JSON, nullable=False, default=list)  # GroceryItem dicts
    created_at = db.Column(db.DateTime(timezone=True), default=_now)

    def to_dict(self):
        return {
            "id": self.id,
            "recipe_id": self.recipe_id,
            "items": list(self.items or []),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
