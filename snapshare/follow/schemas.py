from typing import Any, Literal, Union
from typing_extensions import Annotated
from pydantic import BaseModel, Discriminator, Field, Tag, field_validator

class _EditBase(BaseModel):
    """`id` is the acting user; the edited user comes from the path"""
    action: str
    id: str = Field(min_length=1)

    @field_validator("action", mode="before")
    @classmethod
    def lowercase_action(cls, v):
        return v.lower() if isinstance(v, str) else v

class FollowEdit(_EditBase):
    action: Literal["follow"]

class UnfollowEdit(_EditBase):
    action: Literal["unfollow"]

def _edit_action(value: Any) -> Any:
    action = value.get("action") if isinstance(value, dict) else getattr(value, "action", None)
    return action.lower() if isinstance(action, str) else action

UserEdit = Annotated[
    Union[
        Annotated[FollowEdit, Tag("follow")],
        Annotated[UnfollowEdit, Tag("unfollow")],
    ],
    Discriminator(_edit_action),
]
