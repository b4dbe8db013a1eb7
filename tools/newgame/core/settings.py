"""Environment tokens consumed by the new-game pipeline."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tools.newgame.core.errors import ConfigurationError

DEFAULT_TASM_REF = "v0.0.1-with-app"
DEFAULT_TGO_REF = "v0.0.1"

REQUIRED_VARIABLES = ("TF_VAR_github_org", "TF_VAR_github_pat", "ARM_SUBSCRIPTION_ID")


class NewGameSettings(BaseSettings):
    """Credentials and module references read once at process start."""

    TF_VAR_github_org: str = Field(default="", description="GitHub organization for the repo")
    TF_VAR_github_pat: str = Field(default="", description="GitHub token with repo create rights")
    ARM_SUBSCRIPTION_ID: str = Field(default="", description="Azure subscription id")

    TASM_REF: str = Field(
        default="", description="terraform-azure-simple-modules ref (empty selects the default)"
    )
    TGO_REF: str = Field(
        default="", description="terraform-github-orchestration ref (empty selects the default)"
    )
    SKIP_CREATE_STACK: str = Field(default="", description="'true' skips the final stack apply")
    AUTO_START_NEW_GAME: str = Field(default="", description="'true' skips the confirmation")

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    @property
    def github_org(self) -> str:
        return self.TF_VAR_github_org

    @property
    def github_pat(self) -> str:
        return self.TF_VAR_github_pat

    @property
    def subscription_id(self) -> str:
        return self.ARM_SUBSCRIPTION_ID

    @property
    def tasm_ref(self) -> str:
        return self.TASM_REF or DEFAULT_TASM_REF

    @property
    def tgo_ref(self) -> str:
        return self.TGO_REF or DEFAULT_TGO_REF

    @property
    def skip_create_stack(self) -> bool:
        return self.SKIP_CREATE_STACK == "true"

    @property
    def auto_start(self) -> bool:
        return self.AUTO_START_NEW_GAME == "true"

    def missing_required(self) -> list[str]:
        return [name for name in REQUIRED_VARIABLES if not getattr(self, name)]

    def require_credentials(self) -> None:
        missing = self.missing_required()
        if missing:
            raise ConfigurationError(
                "Please set the environment variables: " + ", ".join(missing)
            )
