from sqlalchemy import Column, DateTime, Integer, String, Text, func

from whatsorder.core.database import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True)
    # Identity-provider subject; one business per owner.
    owner_id = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, index=True, nullable=False)
    whatsapp_number = Column(String(15), nullable=False)
    description = Column(Text, nullable=True)
    logo_url = Column(String, nullable=True)
    currency_symbol = Column(String(8), nullable=False, default="₦")
    plan = Column(String(30), nullable=False, default="free")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
