import pytest

from cardflow.services.document import TextLayer
from cardflow.services.document.memory import PillowTextMeasurer
from cardflow.services.fitting import fit_width, set_content


@pytest.fixture()
def slot(measurer):
    return TextLayer("profile-name", (10, 10), measurer, size=12)


def test_set_content_replaces_text(slot):
    set_content(slot, "Ada")
    set_content(slot, "Grace")
    assert slot.contents == "Grace"


def test_short_text_keeps_initial_size(slot):
    set_content(slot, "Ada")
    assert fit_width(slot, 620, 45, 1) == 45


def test_long_text_shrinks_until_width_fits(slot):
    # 31 characters at 0.5 * size each: fits once size <= 40
    set_content(slot, "Alexander Hamilton-Smith Junior")
    size = fit_width(slot, 620, 45, 1)
    assert size == 40
    assert slot.bounds.width <= 620


def test_shrink_stops_at_min_size(slot):
    set_content(slot, "A very long name that will never fit")
    assert fit_width(slot, 1, 45, 10) == 10
    assert slot.bounds.width > 1


def test_width_is_requeried_after_each_step(slot, measurer):
    set_content(slot, "x" * 100)
    measurer.calls = 0
    fit_width(slot, 620, 45, 1)
    # 100 chars fit at 12.4 -> size 12.0 after 66 decrements
    assert slot.size == 12
    assert measurer.calls >= 66


def test_fit_is_idempotent(slot):
    set_content(slot, "Alexander Hamilton-Smith Junior the Third")
    first = fit_width(slot, 620, 45, 1)
    second = fit_width(slot, 620, 45, 1)
    assert first == second


def test_fit_with_pillow_fonts():
    slot = TextLayer("profile-name", (0, 0), PillowTextMeasurer())
    set_content(slot, "Wolfgang Amadeus Mozart " * 4)
    size = fit_width(slot, 300, 45, 1)
    assert 1 <= size < 45
    assert slot.bounds.width <= 300 or size == 1
