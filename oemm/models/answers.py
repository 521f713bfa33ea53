"""
Raw assessment answers.

Answers are owned by the caller and keyed parameter id -> check index ->
CheckAnswer. A missing check entry means "unanswered".
"""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

YES_VALUES = ("yes", "y", "true", "1")
SOME_VALUES = ("some", "maybe", "partial", "0.5")
NO_VALUES = ("no", "n", "false", "0")


def map_yes_some_no(value: Any) -> Optional[float]:
    """
    Map a yes/some/no style answer to 1.0 / 0.5 / 0.0.

    Returns None when the text is not recognised.

    Examples:
        >>> map_yes_some_no("Yes")
        1.0
        >>> map_yes_some_no(" partial ")
        0.5
        >>> map_yes_some_no("perhaps") is None
        True
    """
    s = str(value if value is not None else "").strip().lower()
    if s in YES_VALUES:
        return 1.0
    if s in SOME_VALUES:
        return 0.5
    if s in NO_VALUES:
        return 0.0
    return None


class CheckAnswer(BaseModel):
    """One recorded answer for one check."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    value: Optional[Union[bool, float]] = Field(
        default=None,
        validation_alias=AliasChoices("value", "v"),
        description="Raw answer; meaning depends on the check type"
    )

    not_applicable: bool = Field(
        default=False,
        validation_alias=AliasChoices("not_applicable", "notApplicable", "na"),
        description="Excluded from both numerator and denominator"
    )

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_value(cls, data: Any) -> Any:
        # {"0": true} is shorthand for {"0": {"value": true}}
        if isinstance(data, (dict, BaseModel)):
            return data
        return {"value": data}

    @field_validator("value", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        mapped = map_yes_some_no(v)
        if mapped is not None:
            return mapped
        try:
            return float(v.strip())
        except ValueError:
            raise ValueError(f"Unrecognised answer value: {v!r}")


AnswerSet = Dict[str, Dict[int, CheckAnswer]]

_ANSWER_SET_ADAPTER = TypeAdapter(AnswerSet)


def parse_answers(raw: Mapping[str, Any]) -> AnswerSet:
    """
    Validate a raw answer mapping (e.g. decoded JSON) into an AnswerSet.

    Check-index keys may be strings. Raises pydantic.ValidationError on
    malformed entries.
    """
    return _ANSWER_SET_ADAPTER.validate_python(dict(raw))
