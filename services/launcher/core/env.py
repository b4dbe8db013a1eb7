import os
from typing import Mapping, Optional, Sequence

from ..models import EnvStatus


def env_statuses(
    names: Sequence[str], environ: Optional[Mapping[str, str]] = None
) -> list[EnvStatus]:
    environ = os.environ if environ is None else environ
    return [EnvStatus(variable=name, is_set=bool(environ.get(name))) for name in names]


def missing_env_vars(
    names: Sequence[str], environ: Optional[Mapping[str, str]] = None
) -> list[str]:
    return [status.variable for status in env_statuses(names, environ) if not status.is_set]
