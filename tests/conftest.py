from __future__ import annotations

from typing import Iterator

import pytest

from areacodes.service import AreaCodeService


@pytest.fixture
def service() -> Iterator[AreaCodeService]:
    svc = AreaCodeService()
    try:
        yield svc
    finally:
        svc.close()
