from typing import Literal

from pydantic import BaseModel, Field

from koperasi.components.period import Cadence


class ApiRules(BaseModel):
    base_url: str = "http://localhost:8000"
    organizations_path: str = "/organizations"
    timeout_seconds: float = Field(default=30.0, gt=0)
    token_env: str = "KOPERASI_API_TOKEN"

class PerformaRules(BaseModel):
    cadence: Cadence = Cadence.MONTHLY
    years_back: int = Field(default=2, ge=0)

class CacheRules(BaseModel):
    dedupe_seconds: float = Field(default=60.0, ge=0)

class LoggingRules(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

class ClientRules(BaseModel):
    api: ApiRules = Field(default_factory=ApiRules)
    performa: PerformaRules = Field(default_factory=PerformaRules)
    cache: CacheRules = Field(default_factory=CacheRules)
    logging: LoggingRules = Field(default_factory=LoggingRules)
