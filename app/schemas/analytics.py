from __future__ import annotations
from typing import Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel, NamedCount


class Breakdowns(CamelModel):
    county: List[NamedCount]
    constituency: List[NamedCount]
    ward: List[NamedCount]
    group: List[NamedCount]


class CategoryCounts(CamelModel):
    invited_check_ins: int
    registered_walk_ins: int
    adult_population_check_ins: int
    invited_registered_check_ins: int
    invited_not_registered_check_ins: int
    total_registered_check_ins: int
    total_not_registered_check_ins: int


class EventStatistics(CategoryCounts):
    total_check_ins: int
    total_participants: int
    checked_in_participants: int
    breakdowns: Breakdowns


class HierarchyRow(CamelModel):
    name: str
    total_checked_in: int


class StaffRow(CamelModel):
    id: str
    name: str
    email: str
    check_ins: int
    counties_visited: List[str] = Field(default_factory=list)


class StaffStats(CamelModel):
    staff: List[StaffRow]
    total_users: int
    total_check_ins: int


class StaffAnalytics(CamelModel):
    stats: StaffStats


class CheckedInCount(CamelModel):
    checked_in: int


class VoterStatus(CamelModel):
    registered: CheckedInCount
    non_registered: CheckedInCount


class AttendanceType(CamelModel):
    invited: int
    walk_in: int


class Coverage(CamelModel):
    active: int
    total: int
    rate: int
    label: Optional[str] = None
    active_counties: Optional[int] = None


class ConstituencyRow(CamelModel):
    name: str
    county: str
    count: int


class WardRow(CamelModel):
    name: str
    constituency: str
    county: str
    count: int


class CountyRow(CamelModel):
    name: str
    total_participants: int
    registered: int
    non_registered: int
    active_centers: int


class EventAnalyticsStats(CamelModel):
    checked_in: int
    total_check_ins: int
    age: Dict[str, int]
    gender: Dict[str, int]
    voter_status: VoterStatus
    attendance_type: AttendanceType
    coverage: Coverage
    constituencies: List[ConstituencyRow]
    wards: List[WardRow]
    staff: List[StaffRow]


class EventAnalyticsEvent(CamelModel):
    event_id: str
    event_name: str
    location: Optional[str] = None
    date: Optional[str] = None


class EventAnalytics(CamelModel):
    event: EventAnalyticsEvent
    stats: EventAnalyticsStats


class GlobalAnalyticsStats(CamelModel):
    # escopo global: todas as linhas de participante (ver DESIGN.md)
    checked_in: int
    ledger_checked_in: int
    total_check_ins: int
    age: Dict[str, int]
    gender: Dict[str, int]
    voter_status: VoterStatus
    coverage: Coverage
    counties: List[CountyRow]
    staff: List[StaffRow]


class GlobalAnalytics(CamelModel):
    stats: GlobalAnalyticsStats
