"""
Resolve every item of a session against the grid.

The screen and document adapters both start from plan_items(), so the
rectangles they emit come from one computation.
"""

# local repo modules
import nup_sheet as nups
import nup_sheet.errors
import nup_sheet.fit
import nup_sheet.geometry
import nup_sheet.layout


GridDescriptor = nups.geometry.GridDescriptor
LayoutItem = nups.geometry.LayoutItem
PlacedItem = nups.geometry.PlacedItem
ItemError = nups.geometry.ItemError
InvalidAspectRatioError = nups.errors.InvalidAspectRatioError


#============================================
def place_item(item_index: int, item: LayoutItem, grid: GridDescriptor) -> PlacedItem:
	"""
	Map one item to its slot and resolve its fit in page coordinates.

	Args:
		item_index: Position of the item in the input sequence.
		item: Asset id and aspect ratio.
		grid: Grid descriptor.

	Returns:
		PlacedItem with the plan translated onto the page.
	"""
	slot = nups.layout.map_item(item_index, grid)
	cell = nups.layout.cell_rect(grid, slot)
	local_plan = nups.fit.resolve_fit(
		item.aspect_ratio,
		grid.cell_width,
		grid.cell_height,
		grid.policy,
	)
	return PlacedItem(
		item_index=item_index,
		asset_id=item.asset_id,
		slot=slot,
		cell=cell,
		plan=nups.fit.place_in_cell(local_plan, cell),
	)


#============================================
def plan_items(
	items: list[LayoutItem],
	grid: GridDescriptor,
) -> tuple[list[list[PlacedItem]], list[ItemError]]:
	"""
	Place all items, grouped by page.

	An item with an invalid aspect ratio is reported and its slot stays
	empty; the remaining items keep their positions. Trailing pages left
	with no placed item are dropped.

	Args:
		items: Ordered layout items.
		grid: Grid descriptor.

	Returns:
		Tuple of (pages of placed items, per-item errors).
	"""
	total_pages = nups.layout.page_count(len(items), grid)
	pages: list[list[PlacedItem]] = [[] for _ in range(total_pages)]
	errors: list[ItemError] = []
	for item_index, item in enumerate(items):
		try:
			placed = place_item(item_index, item, grid)
		except InvalidAspectRatioError as error:
			errors.append(ItemError(item_index, item.asset_id, str(error)))
			continue
		pages[placed.slot.page_index].append(placed)
	# a trailing page whose items all failed would print blank
	while pages and not pages[-1]:
		pages.pop()
	return (pages, errors)
