import pytest

from luxselle.core.exceptions import NotFoundError, ValidationError
from luxselle.repos.products import ProductRepo
from luxselle.schemas.product import ProductUpdate


@pytest.fixture
def repo(db_session):
    return ProductRepo(db_session)


@pytest.fixture
async def birkin(repo, product_payload):
    return await repo.create(product_payload, actor="tester")


async def test_create_validates_and_stamps_record(birkin):
    assert birkin.id
    assert birkin.organisation_id == "default"
    assert birkin.brand == "Hermes"
    assert birkin.status == "in_stock"
    assert birkin.created_by == "tester"
    assert birkin.created_at is not None


async def test_create_reports_missing_field(repo):
    with pytest.raises(ValidationError) as exc_info:
        await repo.create({"model": "Birkin 30"})

    assert {"path": "brand", "message": "Field required"} in exc_info.value.details


async def test_create_reports_wrong_type(repo, product_payload):
    with pytest.raises(ValidationError) as exc_info:
        await repo.create({**product_payload, "costPriceEur": "not a number"})

    paths = [detail["path"] for detail in exc_info.value.details]
    assert paths == ["costPriceEur"]


async def test_get_by_id_returns_none_when_absent(repo):
    assert await repo.get_by_id("missing") is None


async def test_get_or_404_raises_when_absent(repo):
    with pytest.raises(NotFoundError):
        await repo.get_or_404("missing")


async def test_set_merges_only_fields_the_caller_set(repo, birkin):
    original_cost = birkin.cost_price_eur

    updated = await repo.set(birkin.id, ProductUpdate(sell_price_eur=13000), actor="editor")

    assert updated.sell_price_eur == 13000
    assert updated.cost_price_eur == original_cost
    assert updated.brand == "Hermes"
    assert updated.updated_by == "editor"


async def test_set_unknown_record_raises(repo):
    with pytest.raises(NotFoundError):
        await repo.set("missing", ProductUpdate(notes="x"))


async def test_remove_deletes_record(repo, birkin):
    await repo.remove(birkin.id)

    assert await repo.get_by_id(birkin.id) is None


async def test_remove_missing_record_is_a_no_op(repo):
    await repo.remove("missing")

    assert await repo.list() == []


async def test_list_is_scoped_to_organisation(db_session, repo, birkin, product_payload):
    other_org = ProductRepo(db_session, organisation_id="other")
    await other_org.create({**product_payload, "brand": "Chanel"})

    assert [p.id for p in await repo.list()] == [birkin.id]
    assert await other_org.get_by_id(birkin.id) is None
