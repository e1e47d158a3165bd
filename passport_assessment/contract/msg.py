"""
Message shapes consumed and produced by the passport assessment contract.

Wire form (JSON) uses snake_case, externally tagged variants:

    {"owner": "owner"}                                          InstantiateMsg
    {"set_score": {"address": "someone", "new_score": 50}}      ExecuteMsg
    {"get_owner": {}}                                           QueryMsg
    {"get_score": {"address": "someone"}}                       QueryMsg

Handlers work on the inner variants (``SetScore``, ``GetOwner``,
``GetScore``); ``ExecuteMsg`` / ``QueryMsg`` only describe the envelope.
"""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, RootModel, StrictInt, StrictStr

from passport_assessment.runtime.state_adapter import INT32_MAX, INT32_MIN


def _utf8_encodable(v: str) -> str:
    try:
        v.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"address is not valid UTF-8 text: {e.reason}") from e
    return v


# Opaque principal identifier, compared only for equality.
# Must encode as UTF-8 since it becomes part of a storage key.
Addr = Annotated[StrictStr, AfterValidator(_utf8_encodable)]

Int32 = Annotated[StrictInt, Field(ge=INT32_MIN, le=INT32_MAX)]


class _Msg(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class InstantiateMsg(_Msg):
    owner: Addr


# --- execute ---


class SetScore(_Msg):
    address: Addr
    new_score: Int32


class SetScoreCall(_Msg):
    model_config = ConfigDict(title="set_score")
    set_score: SetScore


class ExecuteMsg(RootModel[SetScoreCall]):
    model_config = ConfigDict(frozen=True, title="ExecuteMsg")

    @property
    def variant(self) -> SetScore:
        return self.root.set_score

    @classmethod
    def wrap(cls, variant: SetScore) -> "ExecuteMsg":
        return cls(SetScoreCall(set_score=variant))


# --- query ---


class GetOwner(_Msg):
    pass


class GetScore(_Msg):
    address: Addr


class GetOwnerCall(_Msg):
    model_config = ConfigDict(title="get_owner")
    get_owner: GetOwner


class GetScoreCall(_Msg):
    model_config = ConfigDict(title="get_score")
    get_score: GetScore


class QueryMsg(RootModel[Union[GetOwnerCall, GetScoreCall]]):
    model_config = ConfigDict(frozen=True, title="QueryMsg")

    @property
    def variant(self) -> Union[GetOwner, GetScore]:
        if isinstance(self.root, GetOwnerCall):
            return self.root.get_owner
        return self.root.get_score

    @classmethod
    def wrap(cls, variant: Union[GetOwner, GetScore]) -> "QueryMsg":
        if isinstance(variant, GetOwner):
            return cls(GetOwnerCall(get_owner=variant))
        return cls(GetScoreCall(get_score=variant))


# --- responses ---


class OwnerResponse(_Msg):
    """Response for the GetOwner query."""

    owner: Addr


class ScoreResponse(_Msg):
    """Response for the GetScore query."""

    score: Int32


__all__ = [
    "Addr",
    "Int32",
    "InstantiateMsg",
    "SetScore",
    "ExecuteMsg",
    "GetOwner",
    "GetScore",
    "QueryMsg",
    "OwnerResponse",
    "ScoreResponse",
]
