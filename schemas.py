from datetime import timedelta
from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_pascal  # Id, Name, ImageUrl... sur le fil


class ProductCreate(BaseModel):
    # Id accepté mais ignoré: c'est la base qui l'attribue
    id: Optional[int] = None
    name: str
    description: str = ""
    price: float
    image_url: Optional[str] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True

    def to_values(self) -> dict:
        """Colonnes modifiables, sans la clé primaire."""
        return self.model_dump(exclude={"id"})


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: float
    image_url: Optional[str] = None

    class Config:
        alias_generator = to_pascal
        populate_by_name = True
        from_attributes = True


class SearchResponse(BaseModel):
    products: List[ProductResponse]
    response: str
    elapsed_time: timedelta

    class Config:
        alias_generator = to_pascal
        populate_by_name = True
