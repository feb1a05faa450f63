from pydantic import BaseModel, ConfigDict


class _PassThrough(BaseModel):
    # the service adds fields over time; keep whatever it sends
    model_config = ConfigDict(extra="allow")


class Account(_PassThrough):
    id: int | str
    name: str
    balance: float | None = None


class Tag(_PassThrough):
    id: int | str
    name: str
    parentId: int | str | None = None


class Transaction(_PassThrough):
    id: int | str
    description: str | None = None
    date: str | None = None
    type: str | None = None
    amount: float | None = None
    accountId: int | str | None = None
    accountName: str | None = None
    tags: str | list[str] | None = None
    status: str | None = None
