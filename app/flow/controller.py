from collections.abc import Callable
from datetime import datetime

from loguru import logger

from app.errors import SelectionNotFound, SinkError
from app.flow.callbacks import encode_account, encode_category, encode_subcategory
from app.flow.sessions import SessionStore
from app.models.schemas import (
    Button,
    FlowStep,
    OptionCatalog,
    Reply,
    SelectAccount,
    SelectCategory,
    Selection,
    SelectSubcategory,
    Session,
)
from app.parsing.dates import resolve_date
from app.parsing.entry import parse_entry
from app.sink import RecordSink


def _format_amount(amount: float) -> str:
    if amount == int(amount):
        return str(int(amount))
    return str(amount)


class SelectionFlowController:
    """Drives one expense entry per user: category, subcategory, account, save.

    The controller owns the session table. Every press re-reads the session and
    checks its current step; a press that does not fit raises SelectionNotFound
    and leaves the session as it was.
    """

    def __init__(
        self,
        catalog: OptionCatalog,
        sink: RecordSink,
        sessions: SessionStore | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.catalog = catalog
        self.sink = sink
        self.sessions = sessions if sessions is not None else SessionStore()
        self._clock = clock

    def session(self, user_id: int) -> Session | None:
        return self.sessions.get(user_id)

    def cancel(self, user_id: int) -> bool:
        dropped = self.sessions.pop(user_id) is not None
        if dropped:
            logger.info("Session of user {} cancelled", user_id)
        return dropped

    def start(self, user_id: int, text: str) -> Reply:
        """Parse free text and open a new session (raises ParseFailure)."""
        entry = parse_entry(text)
        session = self.sessions.create(user_id, entry)
        logger.info("Session opened for user {}: {} {}", user_id, entry.amount, entry.currency)

        summary = (
            f'Сумма: {_format_amount(session.amount)}, Название: "{session.title}", '
            f"Валюта: {session.currency}."
        )
        if session.raw_date:
            summary += f"\nДата: {session.raw_date}."
        if not self.catalog.categories:
            return Reply(text=summary + "\nВ таблице не настроено ни одной категории.")

        buttons = [
            Button(label=opt.name, callback_data=encode_category(idx))
            for idx, opt in enumerate(self.catalog.categories)
        ]
        return Reply(text=summary + "\nВыберите категорию:", buttons=buttons)

    async def choose(self, user_id: int, selection: Selection) -> Reply:
        session = self.sessions.get(user_id)
        if session is None:
            raise SelectionNotFound("Сессия не найдена. Введите операцию заново.")

        if isinstance(selection, SelectCategory):
            self._expect_step(session, "awaiting_category")
            return self._choose_category(session, selection.index)
        if isinstance(selection, SelectSubcategory):
            self._expect_step(session, "awaiting_subcategory")
            return self._choose_subcategory(session, selection.option_id)
        if isinstance(selection, SelectAccount):
            self._expect_step(session, "awaiting_account")
            return await self._choose_account(session, selection.index)
        raise TypeError(f"Unknown selection: {selection!r}")

    @staticmethod
    def _expect_step(session: Session, step: FlowStep) -> None:
        if session.step != step:
            logger.info(
                "Stale button for user {}: expected {}, session is {}",
                session.user_id, step, session.step,
            )
            raise SelectionNotFound("Эта кнопка уже неактуальна. Продолжите с последнего сообщения.")

    def _choose_category(self, session: Session, index: int) -> Reply:
        # A category recorded while still at this step means it had no subcategories.
        if session.category is not None:
            raise SelectionNotFound(
                "Для выбранной категории нет подкатегорий. Введите операцию заново или отправьте /cancel."
            )
        if not 0 <= index < len(self.catalog.categories):
            raise SelectionNotFound("Категория не найдена. Введите операцию заново.")

        category = self.catalog.categories[index]
        session.category = category.name
        subcategories = self.catalog.subcategories_for(category)
        if not subcategories:
            logger.warning(
                "No subcategories share color {!r} with category {!r}",
                category.color_tag, category.name,
            )
            return Reply(
                text=(
                    f"Категория выбрана: {category.name}.\n"
                    f"Для неё не настроено ни одной подкатегории (цвет «{category.color_tag}»). "
                    "Проверьте настройки таблицы и введите операцию заново."
                )
            )

        session.subcategory_ids = [opt.id for opt in subcategories]
        session.step = "awaiting_subcategory"
        return Reply(
            text=f"Категория выбрана: {category.name}.\nВыберите подкатегорию:",
            buttons=[
                Button(label=opt.name, callback_data=encode_subcategory(opt.id))
                for opt in subcategories
            ],
        )

    def _choose_subcategory(self, session: Session, option_id: str) -> Reply:
        subcategory = self.catalog.subcategory_by_id(option_id)
        if subcategory is None or option_id not in session.subcategory_ids:
            raise SelectionNotFound("Подкатегория не найдена. Введите операцию заново.")

        session.subcategory = subcategory.name
        session.step = "awaiting_account"
        buttons = [
            Button(label=opt.name, callback_data=encode_account(idx))
            for idx, opt in enumerate(self.catalog.accounts)
        ]
        return Reply(
            text=f"Подкатегория выбрана: {subcategory.name}.\nТеперь выберите счёт:",
            buttons=buttons,
        )

    async def _choose_account(self, session: Session, index: int) -> Reply:
        if not 0 <= index < len(self.catalog.accounts):
            raise SelectionNotFound("Счёт не найден. Введите операцию заново.")

        session.account = self.catalog.accounts[index].name
        session.step = "finalizing"
        return await self._finalize(session)

    async def _finalize(self, session: Session) -> Reply:
        # Removed before the sink is awaited, so a repeated press finds nothing.
        if not self.sessions.discard(session):
            logger.info("Session of user {} was replaced before saving", session.user_id)

        resolved = resolve_date(session.raw_date, now=self._clock() if self._clock else None)
        try:
            record = await self.sink.create(session, resolved)
        except SinkError as e:
            logger.error("Could not save record for user {}: {}", session.user_id, e)
            return Reply(text="Произошла ошибка при сохранении записи. Введите операцию заново.")

        logger.info("Record saved for user {}: {} {}", session.user_id, record.title, record.amount)
        return Reply(
            text=(
                "✅ Запись добавлена!\n"
                f"Сумма: {_format_amount(record.amount)},\n"
                f"Название: {record.title},\n"
                f"Валюта: {record.currency},\n"
                f"Дата: {record.date},\n"
                f"Категория: {record.category},\n"
                f"Подкатегория: {record.subcategory},\n"
                f"Счёт: {record.account}"
            )
        )
