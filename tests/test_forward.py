# tests/test_forward.py
import pytest

from conftest import sp
from synctex_locator.errors import SyncTexNotFound
from synctex_locator.forward import ForwardResult, forward_search
from synctex_locator.parse import parse_synctex
from synctex_locator.rect import covering_rectangle

MAIN = "/doc/main.tex"


@pytest.fixture
def model(two_pages_text):
    return parse_synctex(two_pages_text)


def test_end_to_end_single_element(minimal_text):
    res = forward_search(parse_synctex(minimal_text), 12, MAIN)
    assert res.page == 1
    assert res.x == pytest.approx(100)
    assert res.y == pytest.approx(200)


def test_exact_line_matches_covering_rectangle(model):
    res = forward_search(model, 10, MAIN)
    c = covering_rectangle(model.line_index[MAIN][10][1])
    assert res == ForwardResult(page=1, x=c.left, y=c.bottom)
    assert res.x == pytest.approx(50)
    assert res.y == pytest.approx(100)


def test_exact_line_uses_first_page_bucket(model):
    # line 20 is recorded on pages 1 and 2; page 1 was seen first
    res = forward_search(model, 20, MAIN)
    assert res.page == 1
    assert res.x == pytest.approx(60)
    assert res.y == pytest.approx(200)


def test_line_between_records_is_interpolated(model):
    res = forward_search(model, 15, MAIN)
    assert res.page == 1
    assert res.x == pytest.approx(60)  # taken from the following line
    assert res.y == pytest.approx(150)


def test_interpolation_stays_between_neighbours(model):
    y10 = forward_search(model, 10, MAIN).y
    y20 = forward_search(model, 20, MAIN).y
    lo, hi = sorted((y10, y20))
    for line in range(11, 20):
        y = forward_search(model, line, MAIN).y
        assert lo <= y <= hi


def test_interpolation_across_pages_reports_following_page(model):
    res = forward_search(model, 25, MAIN)
    assert res.page == 2
    assert res.x == pytest.approx(80)
    assert res.y == pytest.approx((200 + 150) / 2)


def test_line_before_first_record(model):
    assert forward_search(model, 1, MAIN) == forward_search(model, 10, MAIN)


def test_line_after_last_record(model):
    res = forward_search(model, 99, MAIN)
    assert res == forward_search(model, 30, MAIN)
    assert res.page == 2
    # snapped, not extrapolated from lines 20 and 30
    assert res.x == pytest.approx(80, abs=1e-4)
    assert res.y == pytest.approx(150, abs=1e-4)


def test_any_line_past_the_end_snaps_to_last_record(model):
    for line in (31, 40, 1000):
        assert forward_search(model, line, MAIN).y == pytest.approx(150, abs=1e-4)


def test_offset_is_added(minimal_text):
    text = minimal_text.replace("X Offset:0", f"X Offset:{sp(25)}").replace("Y Offset:0", f"Y Offset:{sp(50)}")
    res = forward_search(parse_synctex(text), 12, MAIN)
    assert res.x == pytest.approx(125)
    assert res.y == pytest.approx(250)


def test_unknown_input_raises(model):
    with pytest.raises(SyncTexNotFound):
        forward_search(model, 10, "/doc/missing.tex")
    with pytest.raises(LookupError):
        forward_search(model, 10, "/doc/missing.tex")


def test_to_dict(model):
    assert forward_search(model, 10, "/doc/sec.tex").to_dict().keys() == {"page", "x", "y"}
