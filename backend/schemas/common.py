# backend/schemas/common.py
from pydantic import BaseModel, ConfigDict


# Base configuration for ORM compatibility
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Every mutation answers with this, plus any operation specific payload
class MutationResult(BaseModel):
    success: bool = True


class CreatedResult(MutationResult):
    id: int
