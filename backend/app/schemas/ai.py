from pydantic import BaseModel, Field
from typing import Optional


class SRSClientInfo(BaseModel):
    client_name: Optional[str] = Field(None, alias="clientName")
    contact_person: Optional[str] = Field(None, alias="contactPerson")
    email: Optional[str] = None

    class Config:
        populate_by_name = True


class SRSRequest(BaseModel):
    """Inputs for a Software Requirements Specification draft"""
    project_name: str = Field(..., min_length=1, alias="projectName")
    project_description: Optional[str] = Field(None, alias="projectDescription")
    target_audience: Optional[str] = Field(None, alias="targetAudience")
    functional_requirements: Optional[str] = Field(None, alias="functionalRequirements")
    non_functional_requirements: Optional[str] = Field(None, alias="nonFunctionalRequirements")
    client: Optional[SRSClientInfo] = None

    class Config:
        populate_by_name = True


class SRSResponse(BaseModel):
    srs_content: str


class TaskGenerationRequest(BaseModel):
    client_id: Optional[str] = Field(None, alias="clientId")
    project_name: str = Field(..., min_length=1, alias="projectName")
    project_goal: str = Field(..., min_length=1, alias="projectGoal")
    total_budget_in_inr: float = Field(..., ge=0, alias="total_budget_in_INR")
    fixed_costs_in_inr: float = Field(0, ge=0, alias="fixed_costs_in_INR")

    class Config:
        populate_by_name = True


class TaskGenerationResponse(BaseModel):
    tasks: str


class DescriptionRequest(BaseModel):
    project_name: Optional[str] = Field(None, alias="projectName")
    requirements: str = Field(..., min_length=1, alias="projectRequirements")

    class Config:
        populate_by_name = True


class DescriptionResponse(BaseModel):
    description: str
