from datetime import datetime
from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from pipeline_dashboard.db import Base

class PipelineVisit(Base):
    __tablename__ = "pipeline_visits"
    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    visit_count: Mapped[int] = mapped_column(Integer, default=0)
    last_visited_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
