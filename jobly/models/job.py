from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, CheckConstraint
from jobly.core.database import Base


class Job(Base):
    """
    Job posting belonging to a company.

    Deleting the company deletes its jobs (ON DELETE CASCADE).
    """
    __tablename__ = "jobs"
    __table_args__ = (
        CheckConstraint("salary >= 0", name="ck_jobs_salary"),
        CheckConstraint("equity <= 1.0", name="ck_jobs_equity"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False, index=True)
    salary = Column(Integer, nullable=True)
    equity = Column(Numeric, nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    def __repr__(self):
        return f"<Job(id={self.id}, title='{self.title}', company_handle='{self.company_handle}')>"
