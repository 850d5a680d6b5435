"""Plant and fish catalog entries. Both tables share one column layout."""
from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from gardenbook.database import Base


class SpecimenColumns:
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    scientific_name = Column(String(200), nullable=True)
    category = Column(String(100), nullable=True, index=True)  # matches Category.name, not a FK
    description = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)
    image_public_id = Column(String(500), nullable=True)
    qr_code_url = Column(Text, nullable=True)
    qr_public_id = Column(String(500), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def __table_args__(cls):
        # Asset url/handle columns are pairs
        return (
            CheckConstraint(
                "(image_url IS NULL) = (image_public_id IS NULL)",
                name=f"ck_{cls.__tablename__}_image_pair",
            ),
            CheckConstraint(
                "(qr_code_url IS NULL) = (qr_public_id IS NULL)",
                name=f"ck_{cls.__tablename__}_qr_pair",
            ),
        )

    def __repr__(self):
        return f"<{type(self).__name__}(id={self.id}, name='{self.name}')>"


class Plant(SpecimenColumns, Base):
    __tablename__ = "plants"


class Fish(SpecimenColumns, Base):
    __tablename__ = "fish"
