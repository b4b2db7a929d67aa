from typing import Literal

from pydantic import BaseModel, ConfigDict

Currency = Literal["TRY", "GEL", "USD", "RUB"]
FlowStep = Literal[
    "awaiting_category", "awaiting_subcategory", "awaiting_account", "finalizing"
]


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color_tag: str = "default"


class OptionCatalog(BaseModel):
    """Select options snapshot, loaded once at startup."""

    model_config = ConfigDict(frozen=True)

    categories: tuple[Option, ...] = ()
    subcategories: tuple[Option, ...] = ()
    accounts: tuple[Option, ...] = ()

    def subcategories_for(self, category: Option) -> list[Option]:
        # Categories and subcategories are only linked through a shared color.
        return [s for s in self.subcategories if s.color_tag == category.color_tag]

    def subcategory_by_id(self, option_id: str) -> Option | None:
        for option in self.subcategories:
            if option.id == option_id:
                return option
        return None


class ParsedEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount: float
    title: str
    currency: Currency = "RUB"
    raw_date: str | None = None


class Session(BaseModel):
    user_id: int
    amount: float
    title: str
    currency: Currency
    raw_date: str | None = None
    step: FlowStep = "awaiting_category"
    category: str | None = None
    subcategory: str | None = None
    account: str | None = None
    subcategory_ids: list[str] = []

    @classmethod
    def from_entry(cls, user_id: int, entry: ParsedEntry) -> "Session":
        return cls(user_id=user_id, **entry.model_dump())

    @property
    def is_complete(self) -> bool:
        return None not in (self.category, self.subcategory, self.account)


class ResolvedDate(BaseModel):
    model_config = ConfigDict(frozen=True)

    iso_date: str
    month_name: str
    year: str


class ExpenseRecord(BaseModel):
    """One finalized row, as written to the record sink."""

    date: str
    month: str
    year: str
    title: str
    category: str
    subcategory: str
    amount: float
    currency: Currency
    account: str
    operation_type: str = "Расход"
    status: str = "Оплачено"


class SelectCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int


class SelectSubcategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    option_id: str


class SelectAccount(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int


Selection = SelectCategory | SelectSubcategory | SelectAccount


class Button(BaseModel):
    label: str
    callback_data: str


class Reply(BaseModel):
    text: str
    buttons: list[Button] = []


class ParseRequest(BaseModel):
    message: str


class SelectionRequest(BaseModel):
    callback_data: str
