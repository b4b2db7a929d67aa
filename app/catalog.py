from typing import Any, Protocol

from loguru import logger

from app.errors import CatalogLoadError
from app.models import fields
from app.models.schemas import Option, OptionCatalog


class SchemaSource(Protocol):
    async def retrieve_schema(self) -> dict[str, Any]:
        """Return the table's properties, keyed by property name."""
        ...


def select_options(properties: dict[str, Any], name: str) -> tuple[Option, ...]:
    """Options of a single-select property, or nothing if it is anything else."""
    prop = properties.get(name)
    if not prop or prop.get("type") != "select":
        return ()
    return tuple(
        Option(id=opt["id"], name=opt["name"], color_tag=opt.get("color") or "default")
        for opt in prop.get("select", {}).get("options", [])
    )


async def load_catalog(source: SchemaSource) -> OptionCatalog:
    try:
        properties = await source.retrieve_schema()
    except Exception as e:
        raise CatalogLoadError(f"Could not load table schema: {e}") from e

    catalog = OptionCatalog(
        categories=select_options(properties, fields.CATEGORY),
        subcategories=select_options(properties, fields.SUBCATEGORY),
        accounts=select_options(properties, fields.ACCOUNT),
    )
    logger.info("Categories: {}", [o.name for o in catalog.categories])
    logger.info("Subcategories: {}", [o.name for o in catalog.subcategories])
    logger.info("Accounts: {}", [o.name for o in catalog.accounts])
    return catalog
