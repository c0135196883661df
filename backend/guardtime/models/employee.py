from datetime import datetime

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, String

from guardtime.db.session import Base


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_no = Column(String(20), nullable=False, unique=True, index=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True)

    classification = Column(String(20), nullable=False, default="GUARD")  # GUARD|ADMIN
    employment_status = Column(String(20), nullable=False, default="ACTIVE")  # ACTIVE|INACTIVE|TERMINATED

    base_salary = Column(Numeric(scale=2), nullable=False, default=0)
    hourly_rate = Column(Numeric(scale=2), nullable=False, default=0)
    daily_rate = Column(Numeric(scale=2), nullable=False, default=0)

    hire_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(part for part in parts if part)
