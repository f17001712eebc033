from vultrapi.pagination import Links, ListOptions, Meta, drop_empty

ALL_KEYS = {"per_page", "cursor", "main_ip", "label", "tag", "region", "description"}


def test_default_options_have_no_params():
    assert ListOptions().to_params() == {}


def test_only_set_options_are_sent():
    params = ListOptions(per_page=1, cursor="abc").to_params()
    assert params == {"per_page": 1, "cursor": "abc"}


def test_all_options_use_wire_names():
    options = ListOptions(
        per_page=5,
        cursor="c",
        main_ip="10.0.0.1",
        label="l",
        tag="t",
        region="ewr",
        description="d",
    )
    params = options.to_params()
    assert set(params) == ALL_KEYS
    assert params["main_ip"] == "10.0.0.1"
    assert params["region"] == "ewr"


def test_params_are_sorted_by_name():
    params = ListOptions(tag="x", cursor="y", region="z", per_page=2).to_params()
    assert list(params) == sorted(params)


def test_meta_from_dict_with_links():
    meta = Meta.from_dict({"total": 1, "links": {"next": "thisismycusror", "prev": ""}})
    assert meta == Meta(total=1, links=Links(next="thisismycusror", prev=""))


def test_meta_from_dict_without_links():
    assert Meta.from_dict({"total": 8}).links is None
    assert Meta.from_dict({"total": 8, "links": None}).links is None


def test_meta_with_empty_links_object():
    meta = Meta.from_dict({"total": 8, "links": {"next": "", "prev": ""}})
    assert meta.links == Links()
    assert meta.total == 8


def test_links_from_empty_dict():
    assert Links.from_dict({}) == Links(next="", prev="")


def test_drop_empty_removes_zero_values():
    data = {"a": "", "b": 0, "c": None, "d": [], "e": "x", "f": False, "g": {}}
    assert drop_empty(data) == {"e": "x"}


def test_drop_empty_keeps_requested_keys():
    data = {"a": "", "b": 0, "c": None, "e": "x"}
    assert drop_empty(data, keep=("a", "c")) == {"a": "", "c": None, "e": "x"}


def test_drop_empty_does_not_modify_input():
    data = {"a": "", "b": 1}
    drop_empty(data)
    assert data == {"a": "", "b": 1}