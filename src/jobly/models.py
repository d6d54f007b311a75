from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from jobly.errors import BadRequestError


class Payload(BaseModel):
    """
    Base for caller-supplied payloads.
    Public field names are camelCase; snake_case names are accepted too.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    def sparse(self) -> dict[str, Any]:
        """Only the fields the caller actually sent, keyed by public name."""
        return self.model_dump(by_alias=True, exclude_unset=True)


PayloadT = TypeVar("PayloadT", bound=Payload)


def parse(model: type[PayloadT], data: Mapping[str, Any] | None) -> PayloadT:
    """Validate data against model, reporting failures as BadRequestError."""
    try:
        return model.model_validate(data if data is not None else {})
    except ValidationError as e:
        messages = [
            f"{'.'.join(str(part) for part in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        ]
        raise BadRequestError("; ".join(messages)) from e


def _normalize_equity(value: Any) -> str | None:
    """Equity is a decimal string in [0, 1]; numbers are accepted and converted."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("equity must be a decimal number")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"equity must be a decimal number, got '{value}'") from None
    if not amount.is_finite() or not 0 <= amount <= 1:
        raise ValueError(f"equity must be between 0 and 1, got '{value}'")
    return format(amount, "f")


def _reject_null(value: Any) -> Any:
    if value is None:
        raise ValueError("value must not be null")
    return value


# --- Companies ---


class CompanyNew(Payload):
    handle: str = Field(min_length=1, max_length=25)
    name: str = Field(min_length=1)
    description: str
    num_employees: int | None = Field(default=None, ge=0)
    logo_url: str | None = None

    @field_validator("handle")
    @classmethod
    def check_handle(cls, value: str) -> str:
        if value != value.lower():
            raise ValueError("handle must be lowercase")
        return value


class CompanyUpdate(Payload):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    num_employees: int | None = Field(default=None, ge=0)
    logo_url: str | None = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def reject_null_columns(cls, value: Any) -> Any:
        return _reject_null(value)


class CompanyFilter(Payload):
    model_config = ConfigDict(extra="ignore")

    min_employees: int | None = Field(default=None, strict=True)
    max_employees: int | None = Field(default=None, strict=True)
    name: str | None = None

    @field_validator("min_employees", "max_employees", "name", mode="before")
    @classmethod
    def reject_null_filters(cls, value: Any) -> Any:
        return _reject_null(value)


# --- Jobs ---


class JobNew(Payload):
    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: str | None = None
    company_handle: str = Field(min_length=1, max_length=25)

    @field_validator("equity", mode="before")
    @classmethod
    def check_equity(cls, value: Any) -> str | None:
        return _normalize_equity(value)


class JobUpdate(Payload):
    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def reject_null_title(cls, value: Any) -> Any:
        return _reject_null(value)

    @field_validator("equity", mode="before")
    @classmethod
    def check_equity(cls, value: Any) -> str | None:
        return _normalize_equity(value)


class JobFilter(Payload):
    model_config = ConfigDict(extra="ignore")

    title: str | None = None
    min_salary: int | None = Field(default=None, strict=True)
    # Only the literal True filters; anything else is ignored, not validated.
    has_equity: Any = None

    @field_validator("title", "min_salary", mode="before")
    @classmethod
    def reject_null_filters(cls, value: Any) -> Any:
        return _reject_null(value)
