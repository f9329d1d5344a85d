"""Back-office costing: recipe, inventory impact and labor cost calculations."""
