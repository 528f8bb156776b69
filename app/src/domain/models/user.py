from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class User(BaseModel):
    """
    The registration identity an account is created from.

    Attributes:\n
        uid (str): Unique identifier of the user.
        owner_id (str): Identifier of the owner, equal to `uid` for registered users.
        username (str): The chosen username, may be blank before registration completes.
        profile_picture (str): URL of the profile picture or an empty string.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    uid: str
    owner_id: str = ""
    username: str = ""
    profile_picture: str = ""
