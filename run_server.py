import copy
import logging.config
import os

import uvicorn
from uvicorn.config import LOGGING_CONFIG

custom_logging = copy.deepcopy(LOGGING_CONFIG)
log_format = "%(asctime)s | %(levelprefix)s %(name)s | %(message)s"
custom_logging["formatters"]["default"]["fmt"] = log_format
custom_logging["formatters"]["access"]["fmt"] = (
    "%(asctime)s | %(levelprefix)s %(client_addr)s - \"%(request_line)s\" %(status_code)s"
)
custom_logging["formatters"]["default"]["datefmt"] = "%Y-%m-%d %H:%M:%S"
custom_logging["formatters"]["access"]["datefmt"] = "%Y-%m-%d %H:%M:%S"
# Route adapter loggers (ticker lines, cancel outcomes) through uvicorn's handler.
for package in ("exchanges", "data_pipeline", "services"):
    custom_logging["loggers"][package] = {
        "handlers": ["default"],
        "level": "INFO",
        "propagate": False,
    }

HOST = os.getenv("BTCMARKETS_HTTP_HOST", "0.0.0.0")
PORT = int(os.getenv("BTCMARKETS_HTTP_PORT", "8000"))

if __name__ == "__main__":
    logging.config.dictConfig(custom_logging)
    uvicorn.run(
        "services.webapp.main:app",
        host=HOST,
        port=PORT,
        log_config=None,
    )
