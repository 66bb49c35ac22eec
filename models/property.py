from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, func
from .base import Base


class Property(Base):
     """
     Property model - a rental listing.
     Maps to the existing 'properties' table. Listing CRUD lives elsewhere;
     offers only need the owner and the advertised terms.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
     property_name = Column(String(255), nullable=False)

     # Address
     address = Column(String(255), nullable=True)
     city = Column(String(100), nullable=True)

     # Advertised terms
     rent_amount = Column(Numeric(12, 2), nullable=True)
     advance_amount = Column(Numeric(12, 2), nullable=True)
     booking_advance = Column(Numeric(12, 2), nullable=True)

     status = Column(String(50), default="available", nullable=False)  # available, occupied

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.property_name}')>"
