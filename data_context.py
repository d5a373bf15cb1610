from typing import List, Optional

from fastapi import Depends
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_session
from models import Product


class ProductDataContext:
    """Accès à la table product pour une requête (une session par requête)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def all(self) -> List[Product]:
        result = await self.session.execute(select(Product))
        return list(result.scalars().all())

    async def get(self, product_id: int) -> Optional[Product]:
        # Lecture directe, l'objet n'est pas gardé dans l'identity map
        result = await self.session.execute(
            select(Product).where(Product.id == product_id)
        )
        product = result.scalar_one_or_none()
        if product is not None:
            self.session.expunge(product)
        return product

    async def add(self, values: dict) -> Product:
        product = Product(**values)
        self.session.add(product)
        await self.session.commit()
        await self.session.refresh(product)
        return product

    async def update(self, product_id: int, values: dict) -> int:
        result = await self.session.execute(
            update(Product).where(Product.id == product_id).values(**values)
        )
        await self.session.commit()
        return result.rowcount

    async def delete(self, product_id: int) -> int:
        result = await self.session.execute(delete(Product).where(Product.id == product_id))
        await self.session.commit()
        return result.rowcount

    async def search_by_name(self, term: str) -> List[Product]:
        # % et _ dans le terme sont pris littéralement
        result = await self.session.execute(
            select(Product).where(Product.name.icontains(term, autoescape=True))
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Product.id)))
        return result.scalar_one()

    async def seed(self, catalog: List[dict]) -> int:
        """Insère le catalogue si la table est vide, retourne le nombre inséré."""
        if await self.count() > 0:
            return 0
        self.session.add_all([Product(**values) for values in catalog])
        await self.session.commit()
        return len(catalog)


def get_product_context(session: AsyncSession = Depends(get_session)) -> ProductDataContext:
    return ProductDataContext(session)
