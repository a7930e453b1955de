from pydantic import BaseModel, ConfigDict, Field, field_validator

POINTS_PER_WIN = 3


class Player(BaseModel):
    """Player record as stored by the hosted database."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    nickname: str = ""
    wins: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: object) -> object:
        # Integer primary keys come back as JSON numbers.
        return str(v) if isinstance(v, int) else v

    @field_validator("nickname", mode="before")
    @classmethod
    def _null_nickname(cls, v: object) -> object:
        return "" if v is None else v

    @property
    def score(self) -> int:
        return self.wins * POINTS_PER_WIN


class NewPlayer(BaseModel):
    """Insert payload for a player that has no identifier yet."""

    name: str = Field(min_length=1)
    nickname: str
    wins: int = 0
