# sysinventory/modules/environment.py
from typing import List, Mapping

from sysinventory.core.schemas import EnvironmentVariable

# Only these names ever reach the report
ALLOWED_VARIABLES = ("USERNAME", "COMPUTERNAME", "PATH", "TEMP", "APPDATA", "LOGONSERVER")


def collect_environment(environ: Mapping[str, str]) -> List[EnvironmentVariable]:
    return [EnvironmentVariable(name=name, value=environ.get(name)) for name in ALLOWED_VARIABLES]
