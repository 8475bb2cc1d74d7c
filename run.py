import uvicorn

from adhdone.core.config import settings


def main():
    uvicorn.run("adhdone.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
