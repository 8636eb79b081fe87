"""
Parameter validation shared by every endpoint client.

Each endpoint declares a closed pydantic schema (unknown keys rejected);
validate() checks a caller's parameter bag against it and returns the
cleaned dict that is actually transmitted. Failures raise
NylasValidationError before anything touches the network.
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Iterable, Mapping, NoReturn, Optional, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError

from .errors import NylasValidationError

S = TypeVar("S", bound="Schema")


# ── Field types ───────────────────────────────────────────────────────────────

def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be empty")
    return value


def _ymd(value: str) -> str:
    if len(value) != 10:
        raise ValueError("must be a date formatted YYYY-MM-DD")
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("must be a date formatted YYYY-MM-DD") from None
    return value


NonEmptyStr = Annotated[StrictStr, AfterValidator(_not_blank)]
Timestamp = Annotated[StrictInt, Field(ge=0)]
PositiveInt = Annotated[StrictInt, Field(ge=1)]
NonNegativeInt = Annotated[StrictInt, Field(ge=0)]
YmdDate = Annotated[StrictStr, AfterValidator(_ymd)]
Flag = StrictBool


class Schema(BaseModel):
    """Closed key set: every endpoint schema derives from this."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


# ── Entry points ──────────────────────────────────────────────────────────────

def _raise(schema_name: str, exc: PydanticValidationError) -> NoReturn:
    errors = exc.errors(include_url=False)
    details = "; ".join(
        f"{'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}"
        for e in errors
    )
    raise NylasValidationError(
        f"Invalid parameters for {schema_name}: {details}",
        errors=errors,
        schema=schema_name,
    ) from exc


def validate(schema: type[S], params: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """
    Validate a parameter bag and return the dict to transmit.

    Only keys the caller supplied are returned (no defaults injected, None
    treated as "not given"), under their wire names ("from", not "from_").
    """
    try:
        model = schema.model_validate({} if params is None else params)
    except PydanticValidationError as exc:
        _raise(schema.__name__, exc)
    return model.model_dump(by_alias=True, exclude_unset=True, exclude_none=True)


def validate_many(
    schema: type[S], items: Iterable[Mapping[str, Any]]
) -> list[dict[str, Any]]:
    """Validate every mapping of a list against the same schema."""
    adapter = TypeAdapter(list[schema])  # type: ignore[valid-type]
    try:
        models = adapter.validate_python(list(items))
    except PydanticValidationError as exc:
        _raise(f"list[{schema.__name__}]", exc)
    return [
        m.model_dump(by_alias=True, exclude_unset=True, exclude_none=True) for m in models
    ]


_ID_LIST = TypeAdapter(list[NonEmptyStr])


def validate_ids(ids: Iterable[Any]) -> list[str]:
    """Validate a list of resource identifiers (non-empty strings)."""
    try:
        return _ID_LIST.validate_python(list(ids))
    except PydanticValidationError as exc:
        _raise("ids", exc)


def require_non_empty(value: Any, name: str) -> str:
    """Check a single required string (tokens, ids, codes)."""
    if not isinstance(value, str) or not value.strip():
        raise NylasValidationError(f"{name} must be a non-empty string")
    return value
