import json
import logging

from stylemy.core.config import settings


def setup_logging() -> None:
    level = settings.LOG_LEVEL.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
    )
    if settings.JSON_LOGS:
        logging.getLogger().handlers = [JSONLogHandler()]


class JSONLogHandler(logging.StreamHandler):
    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            msg = {
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                msg["exc_info"] = self.formatException(record.exc_info)
            self.stream.write(json.dumps(msg) + "\n")
            self.flush()
        except Exception:
            self.handleError(record)
