from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field


class SourceCounts(BaseModel):
    """Links per source"""
    manual: int = 0
    orcid: int = 0
    openreview: int = 0


class RecentActivity(BaseModel):
    slug: str
    clicks: int
    last_accessed: Optional[str] = Field(None, alias="lastAccessed")


class TopPerformer(BaseModel):
    slug: str
    clicks: int
    title: Optional[str] = None


class StatsOverview(BaseModel):
    """Aggregate statistics over all links"""
    total_links: int = Field(alias="totalLinks")
    total_clicks: int = Field(alias="totalClicks")
    sources: SourceCounts
    tags: Dict[str, int]
    recent_activity: List[RecentActivity] = Field(alias="recentActivity")
    top_performers: List[TopPerformer] = Field(alias="topPerformers")
    period: str
    avg_clicks_per_link: float = Field(alias="avgClicksPerLink")
    unique_tags: int = Field(alias="uniqueTags")
    period_start: str = Field(alias="periodStart")
    generated_at: str = Field(alias="generatedAt")


class TagStats(BaseModel):
    """Tag usage statistics"""
    total_links: int = Field(alias="totalLinks")
    total_clicks: int = Field(alias="totalClicks")
    sources: SourceCounts
    top_tags: List[Tuple[str, int]] = Field(alias="topTags")
    unique_tags: int = Field(alias="uniqueTags")
