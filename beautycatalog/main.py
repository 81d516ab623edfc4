import logging

from fastapi import FastAPI

from beautycatalog.api.v1.catalog import router as catalog_router
from beautycatalog.core.config import settings

# extra= keys emitted by the catalog modules, in display order
LOG_CONTEXT_FIELDS = ("entity", "tier", "count", "endpoint", "table", "method", "status", "reason", "error")


class ContextFormatter(logging.Formatter):
    """Appends the catalog's structured `extra` fields as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = [
            f"{field}={getattr(record, field)}"
            for field in LOG_CONTEXT_FIELDS
            if getattr(record, field, None) not in (None, "")
        ]
        return f"{line} | {' '.join(context)}" if context else line


def configure_logging(level: str) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    root.addHandler(handler)


configure_logging(settings.LOG_LEVEL)

app = FastAPI(title="Beauty Catalog", version="1.0.0")

app.include_router(catalog_router, tags=["catalog"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
