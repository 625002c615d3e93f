from dataclasses import dataclass
from typing import Optional

from sentry_wizard.config import Config


@dataclass
class SentryProjectData:
    org_slug: str
    slug: str
    dsn: Optional[str] = None

    @classmethod
    def from_config(cls, config: Config) -> "SentryProjectData":
        if not config.org or not config.project:
            raise ValueError(
                "Organization and project slugs are required, set SENTRY_ORG and SENTRY_PROJECT or pass --org and --project"
            )
        return cls(org_slug=config.org, slug=config.project, dsn=getattr(config, "dsn", None))
