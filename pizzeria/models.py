from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Role(BaseModel):
    role: str = "diner"


class User(BaseModel):
    """A registered user as returned by the API (never carries the password)."""

    id: int
    name: str
    email: str
    roles: list[Role] = Field(default_factory=lambda: [Role()])


class MenuItem(BaseModel):
    id: int
    title: str
    description: str
    image: str
    price: float


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    menu_id: int = Field(alias="menuId")
    description: str
    price: float


class OrderRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    franchise_id: int = Field(default=1, alias="franchiseId")
    store_id: int = Field(default=1, alias="storeId")
    items: list[OrderItem]

    @property
    def total(self) -> float:
        return sum(item.price for item in self.items)


class Order(OrderRequest):
    id: int
    diner_id: int = Field(alias="dinerId")


class RegisterRequest(BaseModel):
    name: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str
