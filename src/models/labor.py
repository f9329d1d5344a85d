"""
Shift and TimePunch models.

Shifts are scheduled (forward-looking) work; time punches are the raw
clock events recorded for actual (historical) work.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Shift(BaseModel):
    """
    Scheduled shift.

    Attributes:
        employee_id: Scheduled employee
        start_time: Shift start (UTC)
        end_time: Shift end (UTC)
        break_duration: Unpaid break, in minutes
    """

    __tablename__ = "shifts"

    employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    break_duration = Column(Integer, nullable=False, default=0)

    employee = relationship("Employee", back_populates="shifts")

    __table_args__ = (Index("idx_shift_start", "start_time"),)


class TimePunch(BaseModel):
    """
    Time clock punch.

    Attributes:
        employee_id: Punching employee
        punch_time: When the punch happened (UTC)
        punch_type: clock_in / clock_out / break_start / break_end
    """

    __tablename__ = "time_punches"

    employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True
    )
    punch_time = Column(DateTime, nullable=False)
    punch_type = Column(String(20), nullable=False)

    employee = relationship("Employee", back_populates="time_punches")

    __table_args__ = (Index("idx_time_punch_time", "punch_time"),)
