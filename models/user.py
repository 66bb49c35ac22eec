from sqlalchemy import Column, Integer, String, DateTime, func
from .base import Base


class User(Base):
     """
     User model - central authentication table.
     Maps to the existing 'users' table; tenants and owners are both users.
     The rental workflow only reads from it.
     """
     __tablename__ = "users"

     id = Column(Integer, primary_key=True, autoincrement=True)
     email = Column(String(255), unique=True, nullable=False, index=True)
     username = Column(String(100), nullable=True)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=True)
     phone = Column(String(50), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     def __repr__(self):
          return f"<User(id={self.id}, email='{self.email}')>"

     @property
     def full_name(self) -> str:
          return " ".join(part for part in (self.first_name, self.last_name) if part)
