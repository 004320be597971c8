from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, func

from whatsorder.core.database import Base

PAYMENT_STATUSES = ("pending", "paid", "failed")


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)

    # No foreign key: public order logs are accepted for any business id.
    business_id = Column(Integer, index=True, nullable=False)

    customer_note = Column(Text, nullable=True)
    total_price = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    items_summary = Column(Text, nullable=False, default="")
    payment_status = Column(String(20), nullable=False, default="pending")  # pending / paid / failed

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
