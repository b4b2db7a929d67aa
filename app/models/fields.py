# Property names of the expense table.
DATE = "Дата"
MONTH = "Месяц"
YEAR = "Год"
TITLE = "Название"
CATEGORY = "Категория"
SUBCATEGORY = "Подкатегория"
AMOUNT = "Сумма"
CURRENCY = "Валюта"
ACCOUNT = "Счёт"
OPERATION_TYPE = "Тип операции"
STATUS = "Статус"
