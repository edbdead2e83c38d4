"""SuitePulse — Domain Record & Request Models.

Flat rows owned by the hosted database. Extra columns are ignored so schema
additions upstream do not break reads.
"""

from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """Base for backend rows."""

    model_config = ConfigDict(extra="ignore")


# ── Tasks ──

TaskStatus = Literal["todo", "in_progress", "completed", "cancelled", "review"]
TaskPriority = Literal["low", "medium", "high", "urgent"]


class TaskRecord(Record):
    id: str
    user_id: str
    title: str = ""
    status: str = "todo"
    priority: str = "medium"
    points: int = 0
    created_at: Optional[str] = None
    completed_at: Optional[str] = None
    due_date: Optional[str] = None


class CreateTaskRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    priority: TaskPriority = "medium"
    status: TaskStatus = "todo"
    category_id: Optional[str] = None
    project_id: Optional[str] = None
    due_date: Optional[str] = None
    estimated_hours: Optional[float] = None
    tags: List[str] = []
    assigned_to: Optional[Union[List[str], str]] = None


class TaskQuery(BaseModel):
    status: Optional[str] = None
    priority: Optional[str] = None
    category_id: Optional[str] = None
    project_id: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
    sort: Optional[str] = None


# ── Revenue ──


class RevenueRecord(Record):
    id: str
    user_id: Optional[str] = None
    revenue_amount: float = 0.0
    revenue_type: str = "other"
    status: str = "confirmed"
    currency: str = "USD"
    transaction_date: Optional[str] = None
    created_at: Optional[str] = None


class RevenueTarget(Record):
    user_id: str
    target_amount: float
    target_period: Literal["monthly", "quarterly", "yearly"] = "monthly"
    target_type: Literal["total", "sales", "commission", "projects"] = "total"
    period_start: str = ""
    period_end: str = ""
    achievement_amount: float = 0.0


class AddRevenueRequest(BaseModel):
    amount: float = Field(gt=0)
    revenue_type: Literal["sales", "commission", "bonus", "project", "retainer", "other"] = "sales"
    transaction_date: Optional[str] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    status: Literal["confirmed", "pending"] = "confirmed"


# ── Gamification ──


class UserStatsRecord(Record):
    user_id: str
    total_points: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    tasks_completed: int = 0


class LeaderboardEntry(Record):
    user_id: str
    full_name: str = ""
    total_points: int = 0
    current_level: int = 0


# ── Focus ──


class FocusSession(Record):
    id: str
    user_id: Optional[str] = None
    title: str = ""
    planned_duration: int = 0  # minutes
    actual_duration: Optional[int] = None  # minutes
    start_time: str
    end_time: Optional[str] = None
    productivity_score: Optional[float] = None
    status: str = "active"


class FocusSessionStats(Record):
    total_sessions: int = 0
    total_minutes: int = 0
    average_productivity: float = 0.0
    completed_sessions: int = 0


class FocusSessionsResponse(Record):
    sessions: List[FocusSession] = []
    stats: FocusSessionStats


class StartSessionRequest(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    duration: int = Field(gt=0, description="Planned minutes")


class EndSessionRequest(BaseModel):
    session_id: str
    actual_duration: int = Field(ge=0)
    productivity_score: Optional[float] = Field(default=None, ge=0, le=10)


# ── Notifications ──


class NotificationRecord(Record):
    id: str
    user_id: str
    title: str = ""
    message: str = ""
    type: str = "info"
    read_at: Optional[str] = None
    created_at: Optional[str] = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


# ── Users ──


class UserProfile(Record):
    user_id: str
    full_name: str = ""
    email: Optional[str] = None
    role: str = "user"
    company: Optional[str] = None
    job_title: Optional[str] = None


# ── CRM ──


class ClientRecord(Record):
    id: str
    name: str
    email: Optional[str] = None
    company: Optional[str] = None
    status: str = "active"


class CreateClientRequest(BaseModel):
    name: str = Field(min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    notes: Optional[str] = None


class DealRecord(Record):
    id: str
    title: str = ""
    stage: str = "Lead"
    value: float = 0.0
    client_id: Optional[str] = None


class PipelineSummary(BaseModel):
    total_deals: int = 0
    won_deals: int = 0
    lost_deals: int = 0
    active_deals: int = 0
    conversion_rate: int = 0
    average_deal_value: float = 0.0
    pipeline_value: float = 0.0
    won_value: float = 0.0


# ── Finance ──


class InvoiceRecord(Record):
    id: str
    user_id: Optional[str] = None
    total_amount: float = 0.0
    status: str = "pending"
    due_date: Optional[str] = None
    created_at: Optional[str] = None


class ExpenseRecord(Record):
    id: str
    user_id: Optional[str] = None
    amount: float = 0.0
    category: str = "other"
    date: Optional[str] = None
