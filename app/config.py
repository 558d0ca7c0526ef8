from typing import List, Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"
    PORT: int = 5000

    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "promotions"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full URL wins over the postgres parts (sqlite in tests)
    DATABASE_URL: Optional[str] = None

    PAYSTACK_SECRET_KEY: str = ""
    PAYSTACK_BASE_URL: str = "https://api.paystack.co"
    PAYSTACK_TIMEOUT_SECONDS: float = 10.0
    PAYMENT_CURRENCY: str = "NGN"

    # comma separated
    ALLOWED_ORIGIN: str = ""
    ALLOWED_ORIGIN_1: Optional[str] = None
    ALLOWED_ORIGIN_2: Optional[str] = None
    ALLOWED_ORIGIN_3: Optional[str] = None

    # empty -> every plan except "1-month" is the long plan
    PROMOTION_PLANS: str = ""
    VERIFY_IDEMPOTENT: bool = True

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def allowed_origins(self) -> List[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGIN.split(",")]
        origins += [self.ALLOWED_ORIGIN_1, self.ALLOWED_ORIGIN_2, self.ALLOWED_ORIGIN_3]
        return [o for o in origins if o]

    @property
    def promotion_plans(self) -> List[str]:
        return [p.strip() for p in self.PROMOTION_PLANS.split(",") if p.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
