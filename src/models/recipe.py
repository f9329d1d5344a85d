"""
Recipe and RecipeIngredient models.

A recipe (or prep batch) lists products with the quantity and unit used
in the recipe. The recipe unit is independent of the product's purchase
unit; converting between the two is the job of the costing services.
"""

from sqlalchemy import Column, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class Recipe(BaseModel):
    """
    Recipe model.

    Attributes:
        name: Recipe name
        notes: Free-form notes
        ingredients: Ingredient lines
    """

    __tablename__ = "recipes"

    name = Column(String(200), nullable=False, index=True)
    notes = Column(Text, nullable=True)

    ingredients = relationship(
        "RecipeIngredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeIngredient.id",
    )


class RecipeIngredient(BaseModel):
    """
    One ingredient line of a recipe.

    Attributes:
        recipe_id: Owning recipe
        product_id: Product consumed
        quantity: Amount used, in `unit`
        unit: Recipe unit (e.g. "cup", "fl oz", "each")
    """

    __tablename__ = "recipe_ingredients"

    recipe_id = Column(
        Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    product_id = Column(
        Integer, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True
    )
    quantity = Column(Float, nullable=False)
    unit = Column(String(50), nullable=False)

    recipe = relationship("Recipe", back_populates="ingredients")
    product = relationship("Product", back_populates="recipe_ingredients")

    def __repr__(self) -> str:
        """String representation of recipe ingredient."""
        return (
            f"RecipeIngredient(recipe_id={self.recipe_id}, product_id={self.product_id}, "
            f"quantity={self.quantity}, unit='{self.unit}')"
        )
