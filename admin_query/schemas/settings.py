from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class UiSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    direction: Literal["ltr", "rtl"] = "ltr"
    palette_mode: Literal["light", "dark"] = Field(default="light", alias="paletteMode")
    pin_nav: bool = Field(default=True, alias="pinNav")
