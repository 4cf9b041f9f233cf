from pydantic import BaseModel


class StatusBadge(BaseModel):
    status: str
    label: str
    color: str
