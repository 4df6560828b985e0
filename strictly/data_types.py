"""Data types shared by the extractor and its collaborators.

Record is the single output type of the extraction engine. Its field
order is also the column order of the CSV output, which makes it the
persisted schema consumed by the reconciliation tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from strictly.common.exceptions import DataFormatAssumptionException


class Record(BaseModel):
    """One performance: a couple's dance in a given week and its score."""

    model_config = ConfigDict(frozen=True)

    series: int = Field(..., ge=1, description="Series number")
    week: int = Field(..., ge=1, description="Week number within the series")
    performer: str = Field(
        ..., min_length=1, description="Celebrity's full name"
    )
    partner: str = Field(
        ..., min_length=1, description="Professional partner's full name"
    )
    dance: str = Field(..., min_length=1, description="Dance style or name")
    total_score: int = Field(..., ge=0, description="Total judges' score")
    judge_count: int = Field(
        ..., ge=1, description="Number of judges contributing to the total"
    )
    average_score: float = Field(
        ..., ge=1.0, le=10.0, description="total_score / judge_count"
    )
    note: str = Field("", description="Free-text note, e.g. 'group dance'")

    @classmethod
    def validated(cls, source: str, **data: Any) -> Record:
        """Validate raw field values into a Record.

        Args:
            source: Label of the document the values came from.
            **data: Raw field values.

        Returns:
            The validated Record.

        Raises:
            DataFormatAssumptionException: If validation fails.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            errors_list = [dict(err) for err in e.errors()]
            raise DataFormatAssumptionException(
                errors=errors_list,
                failed_doc=data,
                model_name=cls.__name__,
                source=source,
            ) from e


RECORD_FIELDS: tuple[str, ...] = tuple(Record.model_fields)


@dataclass(frozen=True)
class DocumentPosition:
    """Where in an article an error was detected.

    Attributes:
        series: Series number of the article.
        section: Label of the heading in force, "" before the first one.
        row: 1-based index of the table row within the section.
    """

    series: int
    section: str
    row: int

    @property
    def source(self) -> str:
        return f"series {self.series}"
