import secrets

from pydantic import AliasChoices, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore", validate_assignment=True)

    EDITOR_SERVICE_VERSION: str = Field(
        "dev",
        min_length=1,
        validation_alias=AliasChoices("EDITOR_SERVICE_VERSION", "EDITOR_SERVICE_IMAGE_RELEASE_VERSION"),
    )
    EDITOR_SERVICE_LOG_LEVEL: int = Field(20, ge=0, le=50)
    EDITOR_SERVICE_DEBUG_MODE: bool = Field(False)
    EDITOR_SERVICE_HOST: str = Field("0.0.0.0", min_length=1)
    EDITOR_SERVICE_PORT: int = Field(8080, ge=1, le=65535)
    EDITOR_WEB_SERVICE_WORKERS: int = Field(1, ge=1)

    EDITOR_ENV: str = Field(
        "development",
        validation_alias=AliasChoices("EDITOR_ENV", "NODE_ENV", "APP_ENV"),
    )

    EDITOR_SESSION_SECRET: str = Field(default_factory=lambda: secrets.token_urlsafe(32), min_length=16)
    EDITOR_SESSION_COOKIE: str = Field("editor_session", min_length=1)

    GITHUB_TOKEN: str | None = None
    GITHUB_OWNER: str | None = None
    GITHUB_REPO: str | None = None
    GITHUB_BRANCH: str | None = None
    GITHUB_API_URL: str = Field("https://api.github.com", min_length=1)
    GITHUB_API_TIMEOUT: int = Field(20, gt=0)

    EDITOR_POSTS_DIR: str = Field("_posts", min_length=1)
    EDITOR_ASSETS_DIR: str = Field("assets/images", min_length=1)
    EDITOR_MAX_UPLOAD_SIZE: int = Field(5 * 1024 * 1024, gt=0)

    EDITOR_DEFAULT_COMMITTER_NAME: str = Field("Editor App", min_length=1)
    EDITOR_DEFAULT_COMMITTER_EMAIL: str = Field("editor@example.com", min_length=1)

    @field_validator("EDITOR_ENV", mode="before")
    @classmethod
    def normalize_env(cls, value: str) -> str:
        return str(value).strip().lower()

    @field_validator("GITHUB_OWNER", "GITHUB_REPO", "GITHUB_TOKEN", "GITHUB_BRANCH", mode="before")
    @classmethod
    def blank_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("EDITOR_POSTS_DIR", "EDITOR_ASSETS_DIR")
    @classmethod
    def strip_slashes(cls, value: str) -> str:
        value = value.strip("/")
        if not value or ".." in value.split("/"):
            raise ValueError(f"Invalid repository directory: {value!r}")
        return value

    @field_validator("GITHUB_API_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def LOG_LEVEL(self) -> int:
        # 50 - CRITICAL, 40 - ERROR, 30 - WARNING, 20 - INFO, 10 - DEBUG, 0 - NOTSET
        return self.EDITOR_SERVICE_LOG_LEVEL

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DEBUG_MODE(self) -> bool:
        return self.EDITOR_SERVICE_DEBUG_MODE and not self.IS_PRODUCTION

    @computed_field  # type: ignore[prop-decorator]
    @property
    def IS_PRODUCTION(self) -> bool:
        return self.EDITOR_ENV == "production"

    @property
    def HAS_SESSION_SECRET(self) -> bool:
        # the random default only holds within one process
        return "EDITOR_SESSION_SECRET" in self.model_fields_set

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ALLOWED_IMAGE_TYPES(self) -> tuple[str, ...]:
        return ALLOWED_IMAGE_TYPES

    @computed_field  # type: ignore[prop-decorator]
    @property
    def REPOSITORY(self) -> str:
        if not self.GITHUB_OWNER or not self.GITHUB_REPO:
            return ""
        return f"{self.GITHUB_OWNER}/{self.GITHUB_REPO}"

settings = Settings() # type: ignore[call-arg]
