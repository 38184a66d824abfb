"""Product catalog constants."""

from django.db import models


class ProductStatus(models.TextChoices):
    ACTIVE = "active", "Ativo"
    INACTIVE = "inactive", "Inativo"


class ProductCategory(models.TextChoices):
    COMIDA = "Comida", "Comida"
    LANCHONETE = "Lanchonete", "Lanchonete"
    ASSADOS = "Assados", "Assados"
    SOBREMESA = "Sobremesa", "Sobremesa"
    FESTA = "Festa", "Festa"
    CONGELADOS = "Congelados", "Congelados"


# Storefront shows "few left" at or below this when a product has no threshold
DEFAULT_LOW_STOCK_THRESHOLD = 3

PRODUCT_NAME_MAX_LENGTH = 120
