from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

class Settings(BaseSettings):
    # Notion credentials (required for the notion backend)
    notion_token: str | None = None
    notion_database_id: str | None = None
    notion_version: str = "2022-06-28"
    notion_base_url: str = "https://api.notion.com"
    notion_timeout: float | None = None     # seconds; None keeps the SDK default

    # "notion" talks to the remote database, "sql" to a local SQLAlchemy table
    store_backend: Literal["notion", "sql"] = "notion"
    database_url: str = "sqlite:///focus.db"

    # civil zone "today" is computed in
    timezone: str = "Asia/Seoul"

    # property names in the focus database
    day_property: str = "day"
    subject_property: str = "subject"
    focus_property: str = "focus"

    # "client": fetch the whole day and match subjects here (richer 404s)
    # "server": push the subject filter into the query
    subject_match: Literal["client", "server"] = "client"
    query_limit: int = 100

    # optional; when set, X-API-Key must match
    api_key: str | None = None
    log_level: str = "INFO"

    # load .env, ignore unknown keys so new vars don't break boot
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def require_notion_credentials(self) -> tuple[str, str]:
        if not self.notion_token or not self.notion_database_id:
            raise ConfigurationError()
        return self.notion_token, self.notion_database_id

    # ---- UPPERCASE aliases matching the env var names ----
    @property
    def NOTION_TOKEN(self) -> str | None:
        return self.notion_token

    @property
    def NOTION_DATABASE_ID(self) -> str | None:
        return self.notion_database_id

settings = Settings()
