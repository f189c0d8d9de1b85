"""
Pytest configuration and shared fixtures.
"""

import json
from unittest.mock import MagicMock

import pytest

from anrsi_portal.core.domain import (
    LOCALES,
    ListItem,
    LocalizedDocument,
    Page,
    User,
)
from anrsi_portal.core.domain.page_kinds import REPORTS
from anrsi_portal.core.ports import PortalPort


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (HTTP service, wiring)")
    config.addinivalue_line("markers", "slow: Slow tests (network, large data)")


@pytest.fixture
def reports_kind():
    """The annual reports page kind (one list, downloadUrl attachments)."""
    return REPORTS


@pytest.fixture
def reports_document():
    """Three aligned reports in every locale, no attachments yet."""
    doc = LocalizedDocument.empty(REPORTS.name, REPORTS.list_keys)
    for position, year in enumerate(("2023", "2022", "2021")):
        item_id = f"r{position}"
        for locale in LOCALES:
            doc[locale].items("rapports").append(
                ListItem(id=item_id, title=f"Rapport {year} ({locale.value})", year=year)
            )
    doc.fr.hero_title = "Rapports Annuels"
    doc.ar.hero_title = "التقارير السنوية"
    return doc


@pytest.fixture
def legacy_flat_page():
    """A page saved before translations existed."""
    return Page(
        id=7,
        slug="rapports-annuels",
        content=json.dumps(
            {"heroTitle": "T", "rapports": [{"year": "2020", "title": "R1"}]}
        ),
    )


@pytest.fixture
def editor_user():
    return User(id=1, username="editor1", email="editor@anrsi.mr", role="EDITOR")


@pytest.fixture
def admin_user():
    return User(id=2, username="admin", email="admin@anrsi.mr", role="ADMIN")


@pytest.fixture
def mock_portal():
    """PortalPort double; upload returns a URL derived from the file name."""
    portal = MagicMock(spec=PortalPort)
    portal.upload.side_effect = lambda kind, path, content_type: f"/uploads/{path.name}"
    return portal
