import os
from typing import Mapping, Optional

DEFAULT_SENTRY_URL = "https://sentry.io/"


class Config:
    def __init__(
        self,
        url: str = DEFAULT_SENTRY_URL,
        org: Optional[str] = None,
        project: Optional[str] = None,
        auth_token: Optional[str] = None,
        **kwargs
    ):
        self.url = url
        self.org = org
        self.project = project
        self.auth_token = auth_token
        self.__dict__.update(kwargs)

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Config":
        environ = os.environ if environ is None else environ
        values = {
            "url": environ.get("SENTRY_URL") or DEFAULT_SENTRY_URL,
            "org": environ.get("SENTRY_ORG"),
            "project": environ.get("SENTRY_PROJECT"),
            "auth_token": environ.get("SENTRY_AUTH_TOKEN"),
        }
        # Explicit values win over the environment
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
