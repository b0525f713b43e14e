import uvicorn

from matricpulse.config.settings import settings


def run() -> None:
    uvicorn.run("matricpulse.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
