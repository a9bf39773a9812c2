from bzkanban.app import PAGE_BOARD, PAGE_SETUP, page_order


def test_page_order_pins_board_and_setup():
    assert page_order(["Zeta", PAGE_SETUP, "Alpha", PAGE_BOARD]) == [PAGE_BOARD, PAGE_SETUP, "Alpha", "Zeta"]


def test_page_order_without_known_pages():
    assert page_order(["b", "a"]) == ["a", "b"]
    assert page_order([]) == []
