"""License name classification.

POMs carry free-form license names. The common spellings of a handful of
licenses are mapped to their SPDX identifiers (https://spdx.org/licenses/);
anything else is reported as written.
"""

from enum import Enum
from typing import Dict, Iterable, List


class Spdx(str, Enum):
    """SPDX identifiers recognized by ossinfo."""

    APACHE_2_0 = "Apache-2.0"
    BSD_2_CLAUSE = "BSD-2-Clause"
    BSD_3_CLAUSE = "BSD-3-Clause"
    ISC = "ISC"
    MIT = "MIT"

    def __str__(self) -> str:
        return self.value


KNOWN_LICENSE_NAMES: Dict[str, Spdx] = {
    "The Apache Software License, Version 2.0": Spdx.APACHE_2_0,
    "The Apache License, Version 2.0": Spdx.APACHE_2_0,
    "Apache 2.0": Spdx.APACHE_2_0,
    "Simplified BSD License": Spdx.BSD_2_CLAUSE,
    "ISC License": Spdx.ISC,
    "MIT License": Spdx.MIT,
}


def classify_license(name: str) -> str:
    """Return the SPDX id for a known license name, or the stripped name itself."""
    name = name.strip()
    spdx = KNOWN_LICENSE_NAMES.get(name)
    return spdx.value if spdx else name


def classify_licenses(names: Iterable[str]) -> List[str]:
    return [classify_license(name) for name in names if name and name.strip()]
