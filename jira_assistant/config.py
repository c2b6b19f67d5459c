import os
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from jira_assistant.errors import ConfigError

load_dotenv()

class Config:
    # JIRA CONFIGURATION
    JIRA_DOMAIN = os.getenv("JIRA_DOMAIN", "")
    JIRA_EMAIL = os.getenv("JIRA_EMAIL", "")
    JIRA_TOKEN = os.getenv("JIRA_TOKEN", "")
    JIRA_PROJECT_KEY = os.getenv("JIRA_PROJECT_KEY", "")

    # LLM
    OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4")

    # CHAT TRANSPORT (read by whatever bot hosts the assistant)
    DISCORD_TOKEN = os.getenv("DISCORD_TOKEN", "")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


REQUIRED = ("JIRA_DOMAIN", "JIRA_EMAIL", "JIRA_TOKEN", "JIRA_PROJECT_KEY")


class Settings(BaseModel):
    """
    Process-lifetime configuration handed to every component.
    Frozen: nothing downstream may mutate it.
    """
    model_config = ConfigDict(frozen=True)

    jira_domain: str
    jira_email: str
    jira_token: str
    project_key: str
    openai_api_key: str = ""
    openai_model: str = "gpt-4"
    discord_token: str = ""
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env=None) -> "Settings":
        """Build settings from a mapping (defaults to the loaded environment)."""
        if env is None:
            env = {name: getattr(Config, name) for name in dir(Config) if name.isupper()}

        missing = [name for name in REQUIRED if not env.get(name)]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        return cls(
            jira_domain=env["JIRA_DOMAIN"].rstrip("/"),
            jira_email=env["JIRA_EMAIL"],
            jira_token=env["JIRA_TOKEN"],
            project_key=env["JIRA_PROJECT_KEY"],
            openai_api_key=env.get("OPENAI_API_KEY") or "",
            openai_model=env.get("OPENAI_MODEL") or "gpt-4",
            discord_token=env.get("DISCORD_TOKEN") or "",
            log_level=env.get("LOG_LEVEL") or "INFO",
        )

    @property
    def api_base(self) -> str:
        return f"{self.jira_domain}/rest/api/3"

    def browse_url(self, key: str) -> str:
        return f"{self.jira_domain}/browse/{key}"
