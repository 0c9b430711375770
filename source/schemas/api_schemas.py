"""
Pydantic models for API request/response schemas
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import List

from models.job_models import JobSummary


class HealthResponse(BaseModel):
    status: str = "ok"


class ScrapeMeta(BaseModel):
    """Echo of the effective scrape parameters"""
    term: str
    max_pages: int
    publication_date_days: int
    count: int
    source: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ScrapeResponse(BaseModel):
    """Response model for the scrape endpoint"""
    meta: ScrapeMeta
    data: List[JobSummary] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "meta": {
                    "term": "software engineer",
                    "maxPages": 5,
                    "publicationDateDays": 7,
                    "count": 1,
                    "source": "https://www.jobs.ch/en/vacancies/?publication-date=7",
                },
                "data": [
                    {
                        "title": "Backend Engineer",
                        "company": "Acme AG",
                        "location": "Zurich",
                        "workload": "100%",
                        "contractType": "Unlimited employment",
                        "postedText": "3 days ago",
                        "link": "https://www.jobs.ch/en/vacancies/detail/123/",
                        "description": "",
                        "keyInfo": {
                            "publicationDate": "",
                            "workload": "",
                            "contractType": "",
                            "language": "",
                            "placeOfWork": "",
                        },
                    }
                ],
            }
        }


class ErrorResponse(BaseModel):
    error: str
    message: str
