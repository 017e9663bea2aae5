import logging
import os
from collections.abc import Mapping

from koperasi.rules.models import ClientRules


def api_token(rules: ClientRules, environ: Mapping[str, str] | None = None) -> str | None:
    """
    Bearer token from the environment variable named in the rules.
    Empty values count as missing.
    """
    env = os.environ if environ is None else environ
    return env.get(rules.api.token_env) or None


def configure_logging(rules: ClientRules) -> None:
    logging.basicConfig(
        level=getattr(logging, rules.logging.level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
