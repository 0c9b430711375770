from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class KeyInfo(BaseModel):
    """Key facts block of a vacancy detail page."""
    publication_date: str = ""
    workload: str = ""
    contract_type: str = ""
    language: str = ""
    place_of_work: str = ""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JobSummary(BaseModel):
    """One vacancy as found on a listing page, later enriched from its detail page.

    `link` is the identity key: it is unique within a result set and joins
    the listing and detail stages.
    """
    title: str = ""
    company: str = ""
    location: str = ""
    workload: str = ""
    contract_type: str = ""
    posted_text: str = ""
    link: str
    description: str = ""
    key_info: KeyInfo = Field(default_factory=KeyInfo)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JobDetail(BaseModel):
    title: str = ""
    company: str = ""
    description: str = ""
    key_info: KeyInfo = Field(default_factory=KeyInfo)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
