from dataclasses import dataclass

from pydantic import BaseModel


@dataclass
class SweepResult:
    message: str
    deleted: int
    file_errors: int = 0
    update_errors: int = 0
    files_retried: int = 0


class SweepResponse(BaseModel):
    """HTTP body of a successful sweep. Error counts stay in the logs."""
    message: str
    deleted: int
