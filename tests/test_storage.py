import json

from grantcart.cart import CartStateStore
from grantcart.config import Settings
from grantcart.constants import DAI_ADDRESS
from grantcart.models import EMPTY_CART
from grantcart.server import create_app
from grantcart.storage import JsonFileStorage


def test_missing_file_reads_as_empty(tmp_path):
    storage = JsonFileStorage(tmp_path / "cart.json")
    assert storage.get("cart") is None


def test_set_creates_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "cart.json"
    storage = JsonFileStorage(path)

    storage.set("cart", "[]")

    assert json.loads(path.read_text(encoding="utf-8")) == {"cart": "[]"}
    assert not path.with_suffix(".json.tmp").exists()


def test_set_keeps_other_keys(tmp_path):
    storage = JsonFileStorage(tmp_path / "cart.json")
    storage.set("cart", "[]")
    storage.set("other", "x")
    storage.set("cart", "[1]")

    assert storage.get("cart") == "[1]"
    assert storage.get("other") == "x"


def test_set_overwrites_corrupt_file(tmp_path):
    path = tmp_path / "cart.json"
    path.write_text("{not json", encoding="utf-8")
    storage = JsonFileStorage(path)

    storage.set("cart", "[]")

    assert storage.get("cart") == "[]"


def test_cart_recovers_from_corrupt_file(tmp_path, tokens, grants):
    path = tmp_path / "cart.json"
    path.write_text("{not json", encoding="utf-8")
    store = CartStateStore(JsonFileStorage(path), tokens, grants)

    assert store.initialize() == EMPTY_CART
    assert json.loads(path.read_text(encoding="utf-8")) == {"cart": "[]"}


def test_cart_survives_restart_on_disk(tmp_path):
    settings = Settings(cart_storage_path=str(tmp_path / "data" / "cart.json"))

    first = create_app(settings)
    first.state.services.store.add("2")
    first.state.services.store.update_amount("2", "7.25")

    second = create_app(settings)
    items = second.state.services.store.items
    assert [(i.grant_id, i.contribution_token_address, str(i.contribution_amount)) for i in items] == [
        ("2", DAI_ADDRESS, "7.25")
    ]
