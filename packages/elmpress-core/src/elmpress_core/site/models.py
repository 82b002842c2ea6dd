from pydantic import BaseModel


class BuildError(BaseModel):
    file: str
    error: str


class BuildReport(BaseModel):
    converted: int = 0
    copied: int = 0
    errors: list[BuildError] = []
    duration: float = 0.0
