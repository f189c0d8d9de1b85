"""Registry of editable page kinds.

Each kind names the backend slug it is stored under, the per-locale default
text loaded when a page has never been saved, and the repeatable lists its
content holds.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .content import ListItem, LocalizedDocument, new_item_id
from .exceptions import UnknownPageKindError
from .locales import LOCALES, Locale


@dataclass(frozen=True)
class ListSpec:
    """Shape of one repeatable list inside a page.

    Attributes:
        key: Key of the list in the persisted locale content.
        title_field: Authored field acting as the item title (``title`` or ``name``).
        title_only_required: Rows with an empty title are dropped on save.
        attachment_fields: Legacy single-URL keys, in attachment slot order.
    """

    key: str
    title_field: str = "title"
    title_only_required: bool = False
    attachment_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class PageKind:
    """An editable page kind of the portal."""

    name: str
    slug: str
    page_type: str = "STRUCTURED"
    lists: tuple[ListSpec, ...] = ()
    defaults: Mapping[Locale, Mapping[str, str]] = field(default_factory=dict)
    default_items: Mapping[str, tuple[dict[str, Any], ...]] = field(default_factory=dict)
    is_page: bool = True

    @property
    def list_keys(self) -> tuple[str, ...]:
        return tuple(spec.key for spec in self.lists)

    @property
    def default_title(self) -> str:
        """French default title, the last resort for page-level metadata."""
        fr = self.defaults.get(Locale.FR, {})
        return fr.get("title") or fr.get("heroTitle") or self.slug

    def list_spec(self, key: str) -> ListSpec | None:
        for spec in self.lists:
            if spec.key == key:
                return spec
        return None

    def default_document(self) -> LocalizedDocument:
        """Build the document shown when a page has no stored content."""
        doc = LocalizedDocument.empty(self.name, self.list_keys)
        for locale, content in doc.locales():
            for name, value in self.defaults.get(locale, {}).items():
                content.set_field(name, value)
        for key, rows in self.default_items.items():
            for row in rows:
                item_id = new_item_id()
                for locale in LOCALES:
                    doc[locale].items(key).append(ListItem(id=item_id, **row))
        return doc


ARTICLE = PageKind(name="article", slug="articles", page_type="ARTICLE", is_page=False)

CALLS = PageKind(
    name="calls",
    slug="appels-candidatures",
    lists=(
        ListSpec("appels"),
        ListSpec("categories"),
        ListSpec("processSteps"),
        ListSpec("criteria"),
        ListSpec("supportServices"),
        ListSpec("contactInfo", title_field="label"),
    ),
    defaults={
        Locale.FR: {
            "title": "Appels à Candidatures",
            "heroTitle": "Appels à Candidatures",
            "heroSubtitle": "Opportunités de recherche et d'innovation en Mauritanie",
        },
        Locale.AR: {
            "title": "دعوات التقديم",
            "heroTitle": "دعوات التقديم",
            "heroSubtitle": "فرص البحث والابتكار في موريتانيا",
        },
        Locale.EN: {
            "title": "Calls for Applications",
            "heroTitle": "Calls for Applications",
            "heroSubtitle": "Research and innovation opportunities in Mauritania",
        },
    },
)

REPORTS = PageKind(
    name="reports",
    slug="rapports-annuels",
    lists=(ListSpec("rapports", title_only_required=True, attachment_fields=("downloadUrl",)),),
    defaults={
        Locale.FR: {
            "title": "Rapports Annuels",
            "heroTitle": "Rapports Annuels",
            "heroSubtitle": (
                "Rapports annuels de l'Agence Nationale de la Recherche "
                "Scientifique et de l'Innovation"
            ),
        },
    },
    default_items={
        "rapports": (
            {"title": "Rapport 2023", "year": "2023"},
            {"title": "Rapport 2022", "year": "2022"},
        ),
    },
)

LEGAL_TEXTS = PageKind(
    name="legal-texts",
    slug="texts-juridiques",
    lists=(ListSpec("texts", title_only_required=True, attachment_fields=("downloadUrl",)),),
    defaults={
        Locale.FR: {
            "title": "Textes Juridiques",
            "heroTitle": "Textes Juridiques",
            "heroSubtitle": (
                "Textes juridiques régissant l'Agence Nationale de la Recherche "
                "Scientifique et de l'Innovation"
            ),
        },
    },
)

MEDIA = PageKind(
    name="media",
    slug="videos",
    lists=(
        ListSpec("videos", attachment_fields=("url",)),
        ListSpec("photos", attachment_fields=("url",)),
    ),
    defaults={
        Locale.FR: {
            "title": "Mediatique",
            "heroTitle": "Mediatique",
            "heroSubtitle": "Get in touch with our research teams and support staff",
        },
    },
)

AGRI_NEWS = PageKind(
    name="agri-news",
    slug="ai4agri",
    lists=(
        ListSpec("workshops"),
        ListSpec("benefits"),
        ListSpec("partnershipHighlights"),
    ),
    defaults={
        Locale.FR: {
            "title": "AI 4 AGRI",
            "heroTitle": "AI 4 AGRI",
            "heroSubtitle": "Intelligence Artificielle pour l'Agriculture de Précision",
        },
    },
)

PARTNERS = PageKind(
    name="partners",
    slug="partners",
    lists=(
        ListSpec("partners", title_field="name", title_only_required=True, attachment_fields=("logo",)),
    ),
    defaults={
        Locale.FR: {"title": "Nos Partenaires"},
        Locale.AR: {"title": "شركاؤنا"},
        Locale.EN: {"title": "Our Partners"},
    },
)

PAGE_KINDS: dict[str, PageKind] = {
    kind.name: kind for kind in (ARTICLE, CALLS, REPORTS, LEGAL_TEXTS, MEDIA, AGRI_NEWS, PARTNERS)
}


def get_page_kind(name_or_slug: str) -> PageKind:
    """Look up a page kind by registry name or backend slug.

    Raises:
        UnknownPageKindError: If no kind matches.
    """
    if name_or_slug in PAGE_KINDS:
        return PAGE_KINDS[name_or_slug]
    for kind in PAGE_KINDS.values():
        if kind.slug == name_or_slug:
            return kind
    raise UnknownPageKindError(
        f"Unknown page kind '{name_or_slug}'",
        context={"known": sorted(PAGE_KINDS)},
    )
