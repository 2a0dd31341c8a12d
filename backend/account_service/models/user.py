from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.sql import func
import uuid
from account_service.core.database import Base


class User(Base):
    __tablename__ = 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(20), nullable=False)
    login = Column(String(100), unique=True, nullable=False, index=True)
    # bcrypt hash, never the plain password
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.login}>"
