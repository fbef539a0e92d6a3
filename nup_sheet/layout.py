"""
Grid calculation and slot mapping.

Both renderers call these functions with the same inputs, which is what
keeps the screen preview and the PDF geometrically identical.
"""

# local repo modules
import nup_sheet as nups
import nup_sheet.config
import nup_sheet.errors
import nup_sheet.geometry


PageConstants = nups.config.PageConstants
DegenerateLayoutError = nups.errors.DegenerateLayoutError
Rect = nups.geometry.Rect
PageSpec = nups.geometry.PageSpec
GridDescriptor = nups.geometry.GridDescriptor
Slot = nups.geometry.Slot
GuideLine = nups.geometry.GuideLine

ORIENTATION_PORTRAIT = nups.config.ORIENTATION_PORTRAIT


#============================================
def compute_grid(mode: int, page_constants: PageConstants) -> GridDescriptor:
	"""
	Compute the cell grid for a tiling mode.

	Args:
		mode: Items per page, one of the supported modes.
		page_constants: Portrait page size, margin and spacing in mm.

	Returns:
		GridDescriptor for the mode.
	"""
	spec = nups.config.get_mode_spec(mode)
	if page_constants.margin < 0.0 or page_constants.spacing < 0.0:
		raise ValueError("Margin and spacing must be non-negative")
	base_page = PageSpec(
		page_constants.page_width,
		page_constants.page_height,
		ORIENTATION_PORTRAIT,
	)
	page = base_page.for_orientation(spec.orientation)

	margin = page_constants.margin
	spacing = page_constants.spacing
	cell_width = (page.width - 2.0 * margin - (spec.columns - 1) * spacing) / spec.columns
	cell_height = (page.height - 2.0 * margin - (spec.rows - 1) * spacing) / spec.rows
	if cell_width <= 0.0 or cell_height <= 0.0:
		raise DegenerateLayoutError(mode, cell_width, cell_height)

	return GridDescriptor(
		mode=mode,
		columns=spec.columns,
		rows=spec.rows,
		cell_width=cell_width,
		cell_height=cell_height,
		margin=margin,
		spacing=spacing,
		page=page,
		policy=spec.policy,
	)


#============================================
def map_item(item_index: int, grid: GridDescriptor) -> Slot:
	"""
	Map a flat item index onto its page and cell.

	Args:
		item_index: Position in the input sequence.
		grid: Grid descriptor.

	Returns:
		Slot for the item.
	"""
	if item_index < 0:
		raise ValueError(f"Item index must be non-negative, got {item_index}")
	page_index, slot_index = divmod(item_index, grid.items_per_page)
	row, column = divmod(slot_index, grid.columns)
	return Slot(
		item_index=item_index,
		page_index=page_index,
		slot_index=slot_index,
		row=row,
		column=column,
	)


#============================================
def cell_rect(grid: GridDescriptor, slot: Slot) -> Rect:
	"""
	Compute the absolute cell rectangle of a slot on its page.

	Args:
		grid: Grid descriptor.
		slot: Slot from map_item.

	Returns:
		Cell rectangle in page mm.
	"""
	x = grid.margin + slot.column * (grid.cell_width + grid.spacing)
	y = grid.margin + slot.row * (grid.cell_height + grid.spacing)
	return Rect(x, y, grid.cell_width, grid.cell_height)


#============================================
def page_count(item_count: int, grid: GridDescriptor) -> int:
	"""
	Number of pages needed for item_count items.

	Args:
		item_count: Number of items.
		grid: Grid descriptor.

	Returns:
		Page count, zero when there are no items.
	"""
	if item_count <= 0:
		return 0
	return (item_count + grid.items_per_page - 1) // grid.items_per_page


#============================================
def compute_guide_lines(grid: GridDescriptor) -> list[GuideLine]:
	"""
	Compute cut guides centered in each internal spacing gap.

	Args:
		grid: Grid descriptor.

	Returns:
		Vertical guides first, then horizontal guides, in page mm.
	"""
	lines: list[GuideLine] = []
	top = grid.margin
	bottom = grid.page_height - grid.margin
	left = grid.margin
	right = grid.page_width - grid.margin
	for col in range(1, grid.columns):
		line_x = grid.margin + col * grid.cell_width + (col - 0.5) * grid.spacing
		lines.append(GuideLine(line_x, top, line_x, bottom, "vertical"))
	for row in range(1, grid.rows):
		line_y = grid.margin + row * grid.cell_height + (row - 0.5) * grid.spacing
		lines.append(GuideLine(left, line_y, right, line_y, "horizontal"))
	return lines


#============================================
def summarize_grid(grid: GridDescriptor) -> dict:
	"""
	Build a JSON-friendly summary of a grid.

	Args:
		grid: Grid descriptor.

	Returns:
		Dict of grid fields.
	"""
	return {
		"mode": grid.mode,
		"columns": grid.columns,
		"rows": grid.rows,
		"items_per_page": grid.items_per_page,
		"cell_width_mm": round(grid.cell_width, 4),
		"cell_height_mm": round(grid.cell_height, 4),
		"margin_mm": grid.margin,
		"spacing_mm": grid.spacing,
		"page_width_mm": grid.page_width,
		"page_height_mm": grid.page_height,
		"orientation": grid.orientation,
		"policy": grid.policy,
	}
