import math

import pytest

import helpers
import nup_sheet as nups
import nup_sheet.errors
import nup_sheet.fit
import nup_sheet.geometry


ASPECT_RATIOS = [0.2, 0.5, 0.68, 0.75, 1.0, 4.0 / 3.0, 1.5, 2.0, 5.0]


#============================================
def test_cover_crop_tall_image_nine_up() -> None:
	"""
	A 1:2 image in a 9-up cell keeps the top of the source.
	"""
	grid = helpers.build_grid(9)
	plan = nups.fit.resolve_fit(0.5, grid.cell_width, grid.cell_height, "COVER_TOP_CROP")
	assert plan.crop is not None
	assert plan.fill is None
	expected_ratio = grid.cell_height / (grid.cell_width / 0.5)
	assert math.isclose(plan.crop.height, expected_ratio, abs_tol=1e-9)
	assert abs(plan.crop.height - 0.7254) < 0.001
	assert plan.crop.x == 0.0
	assert plan.crop.y == 0.0
	assert plan.crop.width == 1.0
	cell = nups.geometry.Rect(0.0, 0.0, grid.cell_width, grid.cell_height)
	assert plan.placement.isclose(cell)


#============================================
def test_cover_short_image_gets_bottom_fill() -> None:
	"""
	A wide image is anchored at the top with a blank strip below.
	"""
	plan = nups.fit.resolve_fit(2.0, 60.0, 90.0, "COVER_TOP_CROP")
	assert plan.crop is None
	assert plan.placement.isclose(nups.geometry.Rect(0.0, 0.0, 60.0, 30.0))
	assert plan.fill is not None
	assert plan.fill.isclose(nups.geometry.Rect(0.0, 30.0, 60.0, 60.0))


#============================================
def test_cover_exact_fit_has_no_fill_or_crop() -> None:
	plan = nups.fit.resolve_fit(0.5, 40.0, 80.0, "COVER_TOP_CROP")
	assert plan.crop is None
	assert plan.fill is None
	assert plan.placement.isclose(nups.geometry.Rect(0.0, 0.0, 40.0, 80.0))


#============================================
def test_cover_invariants_across_ratios() -> None:
	"""
	Cover always spans the cell width and reaches the cell height.
	"""
	grid = helpers.build_grid(6)
	for ratio in ASPECT_RATIOS:
		plan = nups.fit.resolve_fit(ratio, grid.cell_width, grid.cell_height, "COVER_TOP_CROP")
		assert math.isclose(plan.placement.width, grid.cell_width, abs_tol=1e-6)
		covered = plan.placement.height
		if plan.fill is not None:
			covered += plan.fill.height
			assert math.isclose(plan.fill.y, plan.placement.bottom, abs_tol=1e-6)
		assert math.isclose(covered, grid.cell_height, abs_tol=1e-6)
		assert plan.placement.y == 0.0
		if plan.crop is not None:
			assert 0.0 < plan.crop.height < 1.0
			assert plan.fill is None


#============================================
def test_contain_stays_inside_cell() -> None:
	"""
	Contain shows the whole image and never crops or fills.
	"""
	grid = helpers.build_grid(4)
	cell = nups.geometry.Rect(0.0, 0.0, grid.cell_width, grid.cell_height)
	for ratio in ASPECT_RATIOS:
		plan = nups.fit.resolve_fit(ratio, grid.cell_width, grid.cell_height, "CONTAIN")
		assert plan.crop is None
		assert plan.fill is None
		assert cell.contains(plan.placement)
		assert math.isclose(plan.placement.width / plan.placement.height, ratio, rel_tol=1e-9)
		touches_width = math.isclose(plan.placement.width, grid.cell_width, abs_tol=1e-6)
		touches_height = math.isclose(plan.placement.height, grid.cell_height, abs_tol=1e-6)
		assert touches_width or touches_height


#============================================
def test_contain_centers_image() -> None:
	wide = nups.fit.resolve_fit(2.0, 100.0, 100.0, "CONTAIN")
	assert wide.placement.isclose(nups.geometry.Rect(0.0, 25.0, 100.0, 50.0))
	tall = nups.fit.resolve_fit(0.5, 100.0, 100.0, "CONTAIN")
	assert tall.placement.isclose(nups.geometry.Rect(25.0, 0.0, 50.0, 100.0))


#============================================
@pytest.mark.parametrize("ratio", [0.0, -1.0, float("nan"), float("inf")])
def test_invalid_aspect_ratio_rejected(ratio: float) -> None:
	with pytest.raises(nups.errors.InvalidAspectRatioError):
		nups.fit.resolve_fit(ratio, 50.0, 50.0, "CONTAIN")


#============================================
def test_unknown_policy_and_bad_cell() -> None:
	with pytest.raises(ValueError):
		nups.fit.resolve_fit(1.0, 50.0, 50.0, "STRETCH")
	with pytest.raises(nups.errors.InvariantViolation):
		nups.fit.resolve_fit(1.0, 0.0, 50.0, "CONTAIN")


#============================================
def test_place_in_cell_translates_plan() -> None:
	plan = nups.fit.resolve_fit(2.0, 60.0, 90.0, "COVER_TOP_CROP")
	cell = nups.geometry.Rect(10.0, 20.0, 60.0, 90.0)
	placed = nups.fit.place_in_cell(plan, cell)
	assert placed.placement.isclose(nups.geometry.Rect(10.0, 20.0, 60.0, 30.0))
	assert placed.fill.isclose(nups.geometry.Rect(10.0, 50.0, 60.0, 60.0))


#============================================
def test_crop_box_pixels() -> None:
	crop = nups.geometry.Rect(0.0, 0.0, 1.0, 0.725)
	assert nups.fit.crop_box_pixels(crop, 200, 400) == (0, 0, 200, 290)
	tiny = nups.geometry.Rect(0.0, 0.0, 1.0, 0.0001)
	assert nups.fit.crop_box_pixels(tiny, 10, 10) == (0, 0, 10, 1)
