"""Domain errors. The message of each user-facing error is what the user sees."""


class ExpenseBotError(Exception):
    """Base class for every error raised by the expense flow."""


class ParseFailure(ExpenseBotError):
    def __init__(
        self,
        message: str = 'Не удалось распознать данные. Формат: "3000.45 Название [валюта] [ддммгг]".',
    ):
        super().__init__(message)


class SelectionNotFound(ExpenseBotError):
    def __init__(self, message: str = "Выбор не найден. Введите операцию заново."):
        super().__init__(message)


class SinkError(ExpenseBotError):
    def __init__(self, message: str = "Произошла ошибка при сохранении записи."):
        super().__init__(message)


class CatalogLoadError(ExpenseBotError):
    """Schema could not be fetched at startup. Not user-facing."""
