from sqlalchemy import Column, Integer, String

from gardenbook.database import Base


class Category(Base):
    """Grouping label specimens are filed under."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    # Case-folded name; uniqueness ignores case the same way on every backend
    name_key = Column(String(100), nullable=False, unique=True, index=True)
    type = Column(String(50), nullable=True)  # e.g. "plant", "fish"

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"
