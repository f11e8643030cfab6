from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DB_USER: str = "furniture"
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: str = "3306"
    DB_NAME: str = "furniture_quote"
    # Full SQLAlchemy URL; takes precedence over the DB_* parts when set
    DATABASE_URL: str | None = None

    MEDIA_DIR: str = "media"
    MEDIA_URL_PATH: str = "/media"

    LOG_LEVEL: str = "INFO"
    SEED_DEFAULT_CATALOG: bool = True

    BUSINESS_NAME: str = "RESTOMATT"
    BUSINESS_TAGLINE: str = "Furniture Solutions"
    BUSINESS_PHONE: str = "+91 96364 77399"
    BUSINESS_EMAIL: str = "info@restomatt.com"
    BUSINESS_WEBSITE: str = "www.restomatt.com"
    WHATSAPP_NUMBER: str = "919636477399"
    CURRENCY_SYMBOL: str = "₹"
    QUOTE_VALID_DAYS: int = 30

    @property
    def SQLALCHEMY_DATABASE_URI(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    class Config:
        env_file = ".env"

settings = Settings()
