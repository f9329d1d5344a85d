"""
Product model for purchasable inventory items.

A product is bought in a purchase unit (its "uom_purchase") and inventory
is tracked in that same unit. Container purchase units such as "bottle" or
"case" carry their physical size separately in size_value/size_unit.

Example: "Tito's Vodka" bought by the bottle, each bottle 750 ml,
         cost_per_unit 20.00 per bottle.
"""

from sqlalchemy import Column, Float, Index, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Product(BaseModel):
    """
    Product model representing a purchasable inventory item.

    Attributes:
        name: Product name (also used to detect ingredient-specific conversions)
        uom_purchase: Unit the product is purchased and stocked in
        size_value: Physical size of one purchase unit (containers only)
        size_unit: Unit of size_value
        cost_per_unit: Cost per purchase unit, in dollars
        current_stock: Quantity on hand, in purchase units
    """

    __tablename__ = "products"

    name = Column(String(200), nullable=False, index=True)

    uom_purchase = Column(String(50), nullable=True)
    size_value = Column(Float, nullable=True)
    size_unit = Column(String(50), nullable=True)

    cost_per_unit = Column(Float, nullable=True, default=0.0)
    current_stock = Column(Float, nullable=False, default=0.0)

    recipe_ingredients = relationship("RecipeIngredient", back_populates="product")

    __table_args__ = (Index("idx_product_name", "name"),)

    def __repr__(self) -> str:
        """String representation of product."""
        return f"Product(id={self.id}, name='{self.name}', uom_purchase='{self.uom_purchase}')"
