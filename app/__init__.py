# Keep the package import light: alembic only needs the metadata.
from app.shared.models.base import Base

__all__ = ["Base"]
