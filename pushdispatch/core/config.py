from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "JPush Dispatcher"
    JPUSH_APP_KEY: str | None = None
    JPUSH_MASTER_SECRET: str | None = None
    JPUSH_PUSH_URL: str = "https://api.jpush.cn/v3/push"
    JPUSH_TIMEOUT: float = 10.0
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
