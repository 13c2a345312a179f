"""Tests for GET /api/documents: pagination, filtering and sorting."""

from datetime import date

import pytest
from httpx import AsyncClient

from docrepo.models.document import DocumentType
from docrepo.services.documents import list_documents, soft_delete_document


async def _seed(make_document, count: int, category=DocumentType.THESIS, prefix="Doc"):
    docs = []
    for i in range(count):
        docs.append(await make_document(
            title=f"{prefix} {i + 1:02d}",
            category=category,
            published=date(2000 + i, 1, 1),
        ))
    return docs


@pytest.mark.asyncio
async def test_list_documents_empty(client: AsyncClient):
    resp = await client.get("/api/documents")
    assert resp.status_code == 200
    assert resp.json() == {"documents": [], "total": 0}


@pytest.mark.asyncio
async def test_pages_are_exact_slices(client: AsyncClient, make_document):
    """25 documents over pages of 10: 10, 10, 5, and total is always 25."""
    await _seed(make_document, 25)

    seen = []
    for page, expected in ((1, 10), (2, 10), (3, 5)):
        resp = await client.get("/api/documents", params={"page": page})
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 25
        assert len(data["documents"]) == expected
        seen.extend(d["title"] for d in data["documents"])

    # Default "latest" order: newest publication first, no duplicates across pages
    assert seen == [f"Doc {i:02d}" for i in range(25, 0, -1)]


@pytest.mark.asyncio
async def test_out_of_range_page_keeps_total(client: AsyncClient, make_document):
    await _seed(make_document, 3)

    resp = await client.get("/api/documents", params={"page": 9})
    assert resp.status_code == 200
    assert resp.json() == {"documents": [], "total": 3}


@pytest.mark.asyncio
async def test_category_filter_is_exact(client: AsyncClient, make_document):
    await _seed(make_document, 4, DocumentType.THESIS, prefix="Thesis")
    await _seed(make_document, 2, DocumentType.SYNERGY, prefix="Synergy")

    resp = await client.get("/api/documents", params={"category": "Synergy"})
    data = resp.json()
    assert data["total"] == 2
    assert {d["category"] for d in data["documents"]} == {"Synergy"}


@pytest.mark.asyncio
async def test_category_filter_ignores_case(client: AsyncClient, make_document):
    await _seed(make_document, 2, DocumentType.DISSERTATION)

    resp = await client.get("/api/documents", params={"category": "DISSERTATION"})
    assert resp.json()["total"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["Synthesis", "synthesis", "SYNERGY"])
async def test_synthesis_is_an_alias_for_synergy(client: AsyncClient, make_document, name):
    await _seed(make_document, 1, DocumentType.SYNERGY, prefix="Synergy")
    await _seed(make_document, 1, DocumentType.THESIS)

    resp = await client.get("/api/documents", params={"category": name})
    data = resp.json()
    assert data["total"] == 1
    assert data["documents"][0]["category"] == "Synergy"


def test_parse_legacy_type_names():
    assert DocumentType.parse(" Synthesis ") is DocumentType.SYNERGY
    assert DocumentType.parse("thesis") is DocumentType.THESIS
    with pytest.raises(ValueError):
        DocumentType.parse("Synth")


@pytest.mark.asyncio
async def test_unknown_category_matches_nothing(client: AsyncClient, make_document):
    await _seed(make_document, 2)

    resp = await client.get("/api/documents", params={"category": "Poetry"})
    assert resp.status_code == 200
    assert resp.json() == {"documents": [], "total": 0}


@pytest.mark.asyncio
async def test_sort_earliest_and_title(client: AsyncClient, make_document):
    await make_document(title="Beta", published=date(2010, 5, 1))
    await make_document(title="Alpha", published=date(2015, 5, 1))
    await make_document(title="Gamma", published=date(2005, 5, 1))

    resp = await client.get("/api/documents", params={"sort": "earliest"})
    assert [d["title"] for d in resp.json()["documents"]] == ["Gamma", "Beta", "Alpha"]

    resp = await client.get("/api/documents", params={"sort": "title"})
    assert [d["title"] for d in resp.json()["documents"]] == ["Alpha", "Beta", "Gamma"]


@pytest.mark.asyncio
async def test_unknown_sort_falls_back_to_latest(client: AsyncClient, make_document):
    await make_document(title="Old", published=date(1999, 1, 1))
    await make_document(title="New", published=date(2021, 1, 1))

    resp = await client.get("/api/documents", params={"sort": "most-cited"})
    assert [d["title"] for d in resp.json()["documents"]] == ["New", "Old"]


@pytest.mark.asyncio
async def test_undated_documents_sort_last(client: AsyncClient, make_document):
    await make_document(title="Undated")
    await make_document(title="Dated", published=date(2001, 1, 1))

    for sort in ("latest", "earliest"):
        resp = await client.get("/api/documents", params={"sort": sort})
        assert [d["title"] for d in resp.json()["documents"]] == ["Dated", "Undated"]


@pytest.mark.asyncio
async def test_soft_deleted_documents_are_hidden(client: AsyncClient, session, make_document):
    keep, gone = await _seed(make_document, 2)
    await soft_delete_document(session, gone.id)

    resp = await client.get("/api/documents")
    data = resp.json()
    assert data["total"] == 1
    assert data["documents"][0]["id"] == str(keep.id)


@pytest.mark.asyncio
async def test_summary_shape(client: AsyncClient, make_document):
    await make_document(
        title="Coastal Erosion",
        category=DocumentType.CONFLUENCE,
        published=date(2019, 6, 30),
        authors=["Reyes, Ana", "Cruz, Ben"],
        topics=["Geology", "Climate"],
        volume="12",
        cover_image_path="covers/coastal.png",
    )

    doc = (await client.get("/api/documents")).json()["documents"][0]
    assert doc["title"] == "Coastal Erosion"
    assert doc["category"] == "Confluence"
    assert doc["authors"] == ["Reyes, Ana", "Cruz, Ben"]
    assert doc["topics"] == ["Climate", "Geology"]
    assert doc["year"] == 2019
    assert doc["publication_date"] == "2019-06-30"
    assert doc["volume"] == "12"
    assert doc["cover_image_path"] == "covers/coastal.png"


@pytest.mark.asyncio
async def test_search_matches_title_abstract_and_author(client: AsyncClient, make_document):
    await make_document(title="Mangrove Restoration")
    await make_document(title="Urban Heat", abstract="A study of mangrove-free cities")
    await make_document(title="Soil Microbes", authors=["Mangrovia, Lia"])
    await make_document(title="Unrelated")

    resp = await client.get("/api/documents", params={"search": "MANGROV"})
    titles = {d["title"] for d in resp.json()["documents"]}
    assert titles == {"Mangrove Restoration", "Urban Heat", "Soil Microbes"}


@pytest.mark.asyncio
async def test_search_treats_wildcards_literally(client: AsyncClient, make_document):
    await make_document(title="100% Renewable")
    await make_document(title="Hydropower")

    resp = await client.get("/api/documents", params={"search": "%"})
    assert [d["title"] for d in resp.json()["documents"]] == ["100% Renewable"]


@pytest.mark.asyncio
@pytest.mark.parametrize("params", [{"page": 0}, {"size": 0}, {"size": 101}])
async def test_invalid_paging_params(client: AsyncClient, params):
    resp = await client.get("/api/documents", params=params)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_service_rejects_page_zero(session):
    with pytest.raises(ValueError):
        await list_documents(session, page=0)


@pytest.mark.asyncio
async def test_service_custom_page_size(session, make_document):
    await _seed(make_document, 7)

    result = await list_documents(session, page=2, page_size=3, sort="earliest")
    assert result.total == 7
    assert [d.title for d in result.documents] == ["Doc 04", "Doc 05", "Doc 06"]
