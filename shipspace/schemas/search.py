from typing import Literal

from pydantic import BaseModel, ConfigDict


class SearchCriteria(BaseModel):
    """
    Empty / missing values match everything.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    query: str | None = None
    kind: Literal["all", "offer", "request"] = "all"
    origin_city: str | None = None
    destination_city: str | None = None
