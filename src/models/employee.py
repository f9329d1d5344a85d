"""
Employee and CompensationHistory models.

All monetary fields are stored as integer cents. Which amount fields are
meaningful depends on compensation_type:
- hourly: hourly_rate
- salary: salary_amount + pay_period_type
- contractor: contractor_payment_amount + contractor_payment_interval
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel
from .enums import CompensationType, EmployeeStatus


class Employee(BaseModel):
    """
    Employee model.

    Attributes:
        name: Display name
        position: Job title
        status: active / inactive / terminated
        compensation_type: hourly / salary / contractor
        hourly_rate: Cents per hour
        salary_amount: Cents per pay period
        pay_period_type: weekly / bi-weekly / semi-monthly / monthly
        contractor_payment_amount: Cents per payment interval (or per job)
        contractor_payment_interval: weekly / bi-weekly / monthly / per-job
        hire_date: No cost accrues before this day
        termination_date: No cost accrues after this day
        requires_time_punch: Overrides the per-type punch requirement
    """

    __tablename__ = "employees"

    name = Column(String(200), nullable=False)
    position = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=EmployeeStatus.ACTIVE.value)

    compensation_type = Column(
        String(20), nullable=False, default=CompensationType.HOURLY.value
    )
    hourly_rate = Column(Integer, nullable=False, default=0)
    salary_amount = Column(Integer, nullable=True)
    pay_period_type = Column(String(20), nullable=True)
    contractor_payment_amount = Column(Integer, nullable=True)
    contractor_payment_interval = Column(String(20), nullable=True)

    hire_date = Column(Date, nullable=True)
    termination_date = Column(Date, nullable=True)
    requires_time_punch = Column(Boolean, nullable=True)

    compensation_history = relationship(
        "CompensationHistory",
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="CompensationHistory.effective_date",
    )
    shifts = relationship("Shift", back_populates="employee", cascade="all, delete-orphan")
    time_punches = relationship(
        "TimePunch", back_populates="employee", cascade="all, delete-orphan"
    )

    def to_compensation_record(self) -> dict:
        """Plain record with compensation history, as consumed by the labor services."""
        record = self.to_dict()
        record["compensation_history"] = [entry.to_dict() for entry in self.compensation_history]
        return record


class CompensationHistory(BaseModel):
    """
    A compensation change effective from a given day.

    Attributes:
        employee_id: Employee the change applies to
        effective_date: First day the change applies
        compensation_type: Compensation type from that day
        amount_cents: Rate or amount (interpreted per compensation_type)
        pay_period_type: Pay period for salary entries
        contractor_payment_interval: Payment interval for contractor entries
    """

    __tablename__ = "compensation_history"

    employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    effective_date = Column(Date, nullable=False)
    compensation_type = Column(String(20), nullable=False)
    amount_cents = Column(Integer, nullable=False)
    pay_period_type = Column(String(20), nullable=True)
    contractor_payment_interval = Column(String(20), nullable=True)

    employee = relationship("Employee", back_populates="compensation_history")
