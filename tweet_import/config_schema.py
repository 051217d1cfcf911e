from __future__ import annotations

import codecs
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PositiveInt = Annotated[int, Field(ge=1)]
NonNegativeInt = Annotated[int, Field(ge=0)]

OutputFormat = Literal["json", "jsonl", "xlsx"]


class InputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    encoding: str = "utf-8"
    max_bytes: PositiveInt = 50 * 1024 * 1024

    @field_validator("encoding")
    @classmethod
    def _encoding_must_be_known(cls, v: str) -> str:
        name = (v or "").strip()
        try:
            codecs.lookup(name)
        except LookupError as e:
            raise ValueError(f"unknown text encoding: {name!r}") from e
        return name


class CsvConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    quoted_fields: bool = False  # false keeps the plain comma split


class OutputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    format: OutputFormat = "json"
    indent: NonNegativeInt = 2
    dedupe: bool = False


class InsightsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    top_topics: PositiveInt = 5
    top_authors: PositiveInt = 5


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    input: InputConfig = Field(default_factory=InputConfig)
    csv: CsvConfig = Field(default_factory=CsvConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    insights: InsightsConfig = Field(default_factory=InsightsConfig)
