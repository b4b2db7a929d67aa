import re

from app.errors import SelectionNotFound
from app.models.schemas import SelectAccount, SelectCategory, Selection, SelectSubcategory

_CALLBACK = re.compile(r"^(cat|subcat|acct)_(.+)$")


def encode_category(index: int) -> str:
    return f"cat_{index}"


def encode_subcategory(option_id: str) -> str:
    return f"subcat_{option_id}"


def encode_account(index: int) -> str:
    return f"acct_{index}"


def decode_callback(data: str | None) -> Selection:
    """Turn button callback data into a typed selection."""
    match = _CALLBACK.match(data or "")
    if match is None:
        raise SelectionNotFound("Неизвестная кнопка. Введите операцию заново.")

    step, value = match.groups()
    if step == "subcat":
        return SelectSubcategory(option_id=value)
    if not (value.isascii() and value.isdigit()):
        raise SelectionNotFound("Неизвестная кнопка. Введите операцию заново.")
    if step == "cat":
        return SelectCategory(index=int(value))
    return SelectAccount(index=int(value))
