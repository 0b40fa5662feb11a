from prometheus_fastapi_instrumentator import Instrumentator

from machine_manager import create_app
from machine_manager.core.config import get_settings
from machine_manager.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
app = create_app(settings)
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, include_in_schema=False)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
