from tiny_inventory.services.pagination import build_page_meta, calculate_skip


def test_calculate_skip():
    assert calculate_skip(1, 10) == 0
    assert calculate_skip(3, 10) == 20
    assert calculate_skip(2, 25) == 25


def test_total_pages_rounds_up():
    meta = build_page_meta(total=21, page=1, limit=10)
    assert meta.total_pages == 3
    assert meta.model_dump(by_alias=True) == {"total": 21, "page": 1, "limit": 10, "totalPages": 3}


def test_total_pages_exact_and_empty():
    assert build_page_meta(total=20, page=1, limit=10).total_pages == 2
    assert build_page_meta(total=0, page=1, limit=10).total_pages == 0


def test_page_past_the_end_is_allowed():
    meta = build_page_meta(total=5, page=4, limit=10)
    assert meta.page == 4
    assert meta.total_pages == 1
