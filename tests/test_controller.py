from typing import List

import pytest

from pdf_hotspots.controller import ControllerEvent, InteractiveController
from pdf_hotspots.exceptions import HotspotNotFoundError, InvalidConfigError
from pdf_hotspots.manifest import HotspotAnnotation
from pdf_hotspots.types import HotspotRect, PageSize, Point


@pytest.fixture()
def controller(hotspot_pdf_bytes: bytes) -> InteractiveController:
    controller = InteractiveController()
    controller.initialize(hotspot_pdf_bytes)
    return controller


@pytest.fixture()
def events(controller: InteractiveController) -> List[str]:
    received: List[str] = []
    controller.subscribe(lambda event: received.append(event.kind))
    return received


def test_initialize_reads_pages_and_hotspots(controller: InteractiveController) -> None:
    assert controller.is_initialized
    assert controller.page_count == 3
    assert controller.current_page == 0
    assert controller.get_page_dimensions(0) == PageSize(612, 792)
    assert controller.get_page_dimensions(3) is None
    assert len(controller.hotspots) == 2
    assert [h.content.text for h in controller.current_page_hotspots] == ["Heron"]


def test_initialize_with_explicit_hotspots_and_clamped_page(plain_pdf_bytes: bytes) -> None:
    hotspot = HotspotAnnotation(id="x", page_index=2, rect=HotspotRect(0, 0, 10, 10))
    controller = InteractiveController()

    controller.initialize(plain_pdf_bytes, hotspots=[hotspot], initial_page=99)

    assert controller.current_page == 2
    assert controller.current_page_hotspots == [hotspot]


def test_initialize_tolerates_corrupt_manifest() -> None:
    controller = InteractiveController()

    controller.initialize(b"%PDF %%APDF_MANIFEST_START%%@@@%%APDF_MANIFEST_END%%")

    assert controller.hotspots == []
    assert controller.page_count == 1


def test_navigation(controller: InteractiveController, events: List[str]) -> None:
    controller.next_page()
    controller.next_page()
    controller.next_page()
    assert controller.current_page == 2

    controller.previous_page()
    assert controller.current_page == 1

    controller.first_page()
    controller.previous_page()
    assert controller.current_page == 0

    controller.last_page()
    controller.jump_to_page(7)
    controller.jump_to_page(-1)
    assert controller.current_page == 2
    assert events == ["page_changed"] * 5


def test_show_hotspot_navigates_to_its_page(controller: InteractiveController, events: List[str]) -> None:
    hotspot = controller.show_hotspot("h-custom")

    assert controller.current_page == 1
    assert controller.active_hotspot is hotspot
    assert events == ["hotspot_changed"]

    controller.hide_hotspot()
    controller.hide_hotspot()
    assert controller.active_hotspot is None
    assert events == ["hotspot_changed", "hotspot_changed"]


def test_show_unknown_hotspot_raises(controller: InteractiveController) -> None:
    with pytest.raises(HotspotNotFoundError) as excinfo:
        controller.show_hotspot("missing")

    assert isinstance(excinfo.value, KeyError)
    assert "missing" in str(excinfo.value)


def test_show_hotspot_on_missing_page_keeps_current_page(controller: InteractiveController) -> None:
    controller.add_hotspot(HotspotAnnotation(id="stray", page_index=40, rect=HotspotRect(0, 0, 1, 1)))

    controller.show_hotspot("stray")

    assert controller.current_page == 0
    assert controller.active_hotspot.id == "stray"


def test_page_change_clears_active_hotspot(controller: InteractiveController) -> None:
    controller.show_hotspot("h-custom")
    controller.jump_to_page(0)

    assert controller.active_hotspot is None


def test_set_active_hotspot_only_notifies_on_change(controller: InteractiveController, events: List[str]) -> None:
    hotspot = controller.hotspots[0]

    controller.set_active_hotspot(hotspot)
    controller.set_active_hotspot(hotspot)
    controller.set_active_hotspot(None)
    controller.set_active_hotspot(None)

    assert events == ["hotspot_changed", "hotspot_changed"]


def test_scale_is_clamped(controller: InteractiveController, events: List[str]) -> None:
    controller.set_scale(10)
    assert controller.scale == 4.0

    controller.set_scale(0.2)
    assert controller.scale == 1.0

    controller.set_scale(2.5)
    controller.reset_zoom()
    controller.reset_zoom()
    assert controller.scale == 1.0
    assert events == ["scale_changed"] * 4


def test_invalid_scale_range() -> None:
    with pytest.raises(InvalidConfigError):
        InteractiveController(min_scale=3, max_scale=2)


def test_hotspot_collection_changes(controller: InteractiveController, events: List[str]) -> None:
    controller.show_hotspot("h-custom")

    assert controller.remove_hotspot("h-custom")
    assert not controller.remove_hotspot("h-custom")
    assert controller.active_hotspot is None
    assert controller.hotspots_for_page(1) == []

    controller.update_hotspots([])
    assert controller.hotspots == []
    assert events == ["hotspot_changed", "hotspots_changed", "hotspots_changed"]


def test_hotspots_at_maps_rendered_points(controller: InteractiveController) -> None:
    rendered = PageSize(306, 396)

    hits = controller.hotspots_at(Point(75, 60), rendered)
    assert [h.content.text for h in hits] == ["Heron"]

    assert controller.hotspots_at(Point(10, 10), rendered) == []
    assert controller.hotspots_at(Point(75, 60), rendered, page_index=1) == []
    assert controller.hotspots_at(Point(75, 60), rendered, page_index=12) == []


def test_unsubscribe_stops_events(controller: InteractiveController) -> None:
    received: List[ControllerEvent] = []
    unsubscribe = controller.subscribe(received.append)

    controller.next_page()
    unsubscribe()
    controller.next_page()

    assert received == [ControllerEvent("page_changed")]
