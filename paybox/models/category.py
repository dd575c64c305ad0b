"""
Expense category with its required dynamic fields.
"""
from sqlalchemy import Column, DateTime, Integer, JSON, String

from paybox.dates import utcnow
from paybox.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    nature = Column(String)
    subgroup = Column(String)
    cost_center = Column(String)
    # Ordered list of field names every payment in this category must fill
    required_fields = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=utcnow)
