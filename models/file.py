from sqlalchemy.orm import relationship
from sqlalchemy import Column, Integer, String, Text, ForeignKey, TIMESTAMP, text
from .base import Base

class File(Base):
    __tablename__ = 'file'

    id         = Column(Integer, primary_key=True, autoincrement=True)
    owner_id   = Column(Integer, ForeignKey('user.id', ondelete='CASCADE'), nullable=False, index=True)
    title      = Column(String(255), nullable=False)
    content    = Column(Text, nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(TIMESTAMP, nullable=False,
                        server_default=text('CURRENT_TIMESTAMP'),
                        onupdate=text('CURRENT_TIMESTAMP'))

    # relations
    owner       = relationship("User", back_populates="files")
    favourites  = relationship("Favourite", back_populates="file", cascade="all, delete-orphan")
    trash_items = relationship("Trash", back_populates="file", cascade="all, delete-orphan")
    shares      = relationship("FileShare", back_populates="file", cascade="all, delete-orphan")
    # activities outlive the file; the ORM nulls file_id on delete
    activities  = relationship("Activity", back_populates="file")
