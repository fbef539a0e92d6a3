import math

import helpers
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.document
import nup_sheet.geometry
import nup_sheet.layout
import nup_sheet.placement
import nup_sheet.screen


PARITY_TOLERANCE = 1e-6
ASPECT_RATIOS = [0.3, 0.5, 0.75, 1.0, 1.41, 2.0, 3.5]


#============================================
def _build_items(count: int) -> list:
	items = []
	for index in range(count):
		ratio = ASPECT_RATIOS[index % len(ASPECT_RATIOS)]
		items.append(nups.geometry.LayoutItem(f"asset-{index:04d}", ratio))
	return items


#============================================
def test_screen_and_document_place_items_identically() -> None:
	"""
	Percent boxes scaled back to mm match the PDF draw commands.
	"""
	for mode in nups.config.SUPPORTED_MODES:
		grid = helpers.build_grid(mode)
		items = _build_items(mode * 2 + 3)
		screen_pages, screen_errors = nups.screen.build_screen_pages(items, grid, True)
		page_commands, document_errors = nups.document.build_document_commands(items, grid, True)
		assert screen_errors == document_errors == []
		assert len(screen_pages) == len(page_commands)

		for screen_page, commands in zip(screen_pages, page_commands):
			draws = [command for command in commands if isinstance(command, nups.document.DrawImage)]
			fills = [command for command in commands if isinstance(command, nups.document.FillRect)]
			assert [slot.item_index for slot in screen_page.slots] == [draw.item_index for draw in draws]
			screen_fills = [slot.fill_rect for slot in screen_page.slots if slot.fill_rect is not None]
			assert len(screen_fills) == len(fills)

			for slot, draw in zip(screen_page.slots, draws):
				assert slot.asset_id == draw.asset_id
				image_rect = nups.screen.from_percent_rect(slot.image_rect, grid)
				assert image_rect.isclose(draw.rect, PARITY_TOLERANCE)
				assert slot.crop_rect == draw.crop
			for screen_fill, fill in zip(screen_fills, fills):
				fill_rect = nups.screen.from_percent_rect(screen_fill, grid)
				assert fill_rect.isclose(fill.rect, PARITY_TOLERANCE)


#============================================
def test_guides_match_between_adapters() -> None:
	"""
	Both adapters draw the same cut guides.
	"""
	for mode in nups.config.SUPPORTED_MODES:
		grid = helpers.build_grid(mode)
		items = _build_items(1)
		screen_pages, _ = nups.screen.build_screen_pages(items, grid, True)
		page_commands, _ = nups.document.build_document_commands(items, grid, True)
		strokes = [
			command for command in page_commands[0]
			if isinstance(command, nups.document.StrokeDashedLine)
		]
		guides = screen_pages[0].guides
		assert len(guides) == len(strokes) == (grid.columns - 1) + (grid.rows - 1)
		for guide, stroke in zip(guides, strokes):
			assert math.isclose(guide.x0 * grid.page_width / 100.0, stroke.x0, abs_tol=PARITY_TOLERANCE)
			assert math.isclose(guide.y0 * grid.page_height / 100.0, stroke.y0, abs_tol=PARITY_TOLERANCE)
			assert math.isclose(guide.x1 * grid.page_width / 100.0, stroke.x1, abs_tol=PARITY_TOLERANCE)
			assert math.isclose(guide.y1 * grid.page_height / 100.0, stroke.y1, abs_tol=PARITY_TOLERANCE)


#============================================
def test_guides_toggle_off_in_both_adapters() -> None:
	grid = helpers.build_grid(9)
	items = _build_items(3)
	screen_pages, _ = nups.screen.build_screen_pages(items, grid, False)
	page_commands, _ = nups.document.build_document_commands(items, grid, False)
	assert screen_pages[0].guides == []
	assert not any(isinstance(command, nups.document.StrokeDashedLine) for command in page_commands[0])


#============================================
def test_invalid_item_leaves_slot_empty_in_both() -> None:
	"""
	A bad aspect ratio is reported once and later items keep their slots.
	"""
	grid = helpers.build_grid(4)
	items = _build_items(5)
	items[1] = nups.geometry.LayoutItem("asset-bad", 0.0)
	screen_pages, screen_errors = nups.screen.build_screen_pages(items, grid, False)
	page_commands, document_errors = nups.document.build_document_commands(items, grid, False)
	assert [error.item_index for error in screen_errors] == [1]
	assert screen_errors == document_errors
	assert [slot.item_index for slot in screen_pages[0].slots] == [0, 2, 3]
	assert [slot.item_index for slot in screen_pages[1].slots] == [4]
	draws = [command for command in page_commands[0] if isinstance(command, nups.document.DrawImage)]
	assert [draw.item_index for draw in draws] == [0, 2, 3]
	expected_cell = nups.layout.cell_rect(grid, nups.layout.map_item(2, grid))
	assert expected_cell.contains(draws[1].rect)


#============================================
def test_trailing_page_of_failed_items_dropped() -> None:
	"""
	A last page whose items all fail is not emitted; an earlier empty page is kept.
	"""
	grid = helpers.build_grid(4)
	items = _build_items(5)
	items[4] = nups.geometry.LayoutItem("asset-bad", -1.0)
	screen_pages, screen_errors = nups.screen.build_screen_pages(items, grid, True)
	page_commands, _ = nups.document.build_document_commands(items, grid, True)
	assert len(screen_pages) == len(page_commands) == 1
	assert [error.item_index for error in screen_errors] == [4]

	items = _build_items(5)
	for index in range(4):
		items[index] = nups.geometry.LayoutItem(f"asset-bad-{index}", 0.0)
	pages, errors = nups.placement.plan_items(items, grid)
	assert len(pages) == 2
	assert pages[0] == []
	assert [placed.item_index for placed in pages[1]] == [4]
	assert len(errors) == 4
