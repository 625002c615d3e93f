from sentry_wizard.config import Config
